"""Shopify split-payment PayPal sync for plentymarkets orders."""

__version__ = "0.1.0"
