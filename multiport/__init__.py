"""Hello-world HTTP server and multi-port launchers."""

__version__ = "0.1.0"
