"""Core components: exceptions, settings and factories."""
