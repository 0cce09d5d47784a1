"""Storefront: account authentication and product catalog API."""

__version__ = '1.0.0'
