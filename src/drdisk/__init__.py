"""drdisk - interactive disk usage inspector."""

__version__ = "0.1.0"
