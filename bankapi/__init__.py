"""Bank API: accounts, login tokens and owner-only account access."""

__version__ = "0.1.0"
