"""SQL value semantics, SQL functions and helpers for random test-data templates."""

__version__ = "0.1.0"