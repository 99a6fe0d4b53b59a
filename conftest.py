pytest_plugins = ["acache.testing.fixtures"]
