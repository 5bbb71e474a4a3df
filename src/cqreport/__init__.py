"""CQHTTP-style HTTP event reporter for bot runtimes."""

__all__ = ["__version__"]

__version__ = "0.1.0"
