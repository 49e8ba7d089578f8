"""pqmctl — PQM token contract control CLI for Qtum nodes."""

__version__ = "0.1.0"
