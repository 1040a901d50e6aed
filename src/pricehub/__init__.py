"""PriceHub: multi-tenant B2B pricing API."""

__version__ = "0.1.0"
