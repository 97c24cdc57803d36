"""docgate - documentation update gate for CI."""

__version__ = "0.1.0"
