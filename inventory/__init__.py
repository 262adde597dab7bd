"""Inventory manager: storage, REST API, web UI, client and CLI."""

__version__ = "0.4.0"
