"""apiterm: interactive terminal browser for API descriptions."""

__version__ = "0.1.0"
