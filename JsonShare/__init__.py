"""JsonShare: a small JSON file-sharing API."""

__version__ = "0.1.0"
