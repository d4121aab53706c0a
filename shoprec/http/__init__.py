"""HTTP helpers for talking to other shop services."""

from .client import PersistenceError, RestClient, close_shared_clients, shared_client

__all__ = ["PersistenceError", "RestClient", "close_shared_clients", "shared_client"]
