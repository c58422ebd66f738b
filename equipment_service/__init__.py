"""Digital-twin equipment inventory service."""

__version__ = "0.1.0"
