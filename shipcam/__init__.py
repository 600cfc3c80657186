"""Webhook-triggered camera captures with a rotating gallery."""

__version__ = "0.1.0"
