"""ldesview - read-only TREE views over time-ordered event streams."""

__version__ = "0.1.0"
