"""HTTP bridge that forwards hover and completion requests to a Pyright language server."""

__version__ = "0.1.0"