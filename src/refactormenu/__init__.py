"""Context-sensitive refactoring menu for text editors."""

__version__ = "0.1.0"
