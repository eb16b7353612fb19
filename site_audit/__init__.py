"""Site audit engine: content model collectors and multi-format reports."""

__all__ = ["__version__"]

__version__ = "0.1.0"
