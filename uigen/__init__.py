"""uigen - tool invocation engine over an in-memory project tree"""

__version__ = "0.1.0"
