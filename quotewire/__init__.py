"""QuoteWire: client core for an electrician quoting service."""

__version__ = "1.0.0"
