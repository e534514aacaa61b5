"""HTTP API for the payment sync."""
