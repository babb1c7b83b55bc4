"""memoboard: organize memos under categories from the console."""

__version__ = "0.1.0"
