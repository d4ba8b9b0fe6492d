"""billdesk - invoice line-item pricing and validation engine."""

__version__ = "1.0.0"
