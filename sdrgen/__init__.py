"""Generate typed Python models and services from a Spring Data REST API."""

__version__ = "0.1.0"
