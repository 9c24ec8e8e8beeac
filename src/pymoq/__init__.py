"""Generate thread-safe mock classes for Python Protocol and ABC contracts."""

__version__ = "0.1.0"
