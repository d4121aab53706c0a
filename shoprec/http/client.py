"""Pooled REST client for the shop's entity services."""

from __future__ import annotations

import threading
from typing import Any

import httpx
from loguru import logger

from ..config import RestClientConfig

ClientKey = tuple[str, float, float, bool, httpx.BaseTransport | None]

_shared_clients: dict[ClientKey, httpx.Client] = {}
_shared_lock = threading.Lock()


class PersistenceError(RuntimeError):
    """A REST service answered with an error or could not be reached."""


def _client_key(config: RestClientConfig, transport: httpx.BaseTransport | None) -> ClientKey:
    scheme = "https" if config.use_https else "http"
    return scheme, config.connect_timeout, config.read_timeout, config.verify_tls, transport


def _build_client(key: ClientKey) -> httpx.Client:
    scheme, connect_timeout, read_timeout, verify, transport = key
    if scheme == "https" and not verify:
        logger.warning("TLS certificate validation is disabled for shared {} client.", scheme)
    timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
    return httpx.Client(timeout=timeout, verify=verify, transport=transport)


def shared_client(config: RestClientConfig, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Return the pooled client for the config's scheme and timeouts, creating it once.

    Each distinct ``transport`` object gets its own pool.
    """
    key = _client_key(config, transport)
    client = _shared_clients.get(key)
    if client is not None:
        return client
    with _shared_lock:
        client = _shared_clients.get(key)
        if client is None:
            client = _shared_clients[key] = _build_client(key)
        return client


def close_shared_clients() -> None:
    """Close and forget all pooled clients."""
    with _shared_lock:
        clients = list(_shared_clients.values())
        _shared_clients.clear()
    for client in clients:
        client.close()


def normalize_host_url(host: str, use_https: bool) -> str:
    """Ensure a scheme prefix and a trailing slash."""
    if not host.endswith("/"):
        host += "/"
    if "://" not in host:
        host = ("https://" if use_https else "http://") + host
    return host


class RestClient:
    """Read entities from ``{host}/{application}/{endpoint}``.

    Example: ``RestClient(config, "orders").get_all()``.
    """

    def __init__(
        self,
        config: RestClientConfig,
        endpoint: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.endpoint = endpoint.strip("/")
        self.base_url = normalize_host_url(config.host, config.use_https)
        self._client = shared_client(config, transport)

    @property
    def endpoint_url(self) -> str:
        return f"{self.base_url}{self.config.application.strip('/')}/{self.endpoint}"

    def get_all(self, start: int = -1, limit: int = -1) -> list[dict[str, Any]]:
        """Fetch the endpoint's entity list; negative bounds are omitted."""
        params: dict[str, int] = {}
        if start >= 0:
            params["start"] = start
        if limit >= 0:
            params["max"] = limit

        try:
            response = self._client.get(self.endpoint_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PersistenceError(
                f"{self.endpoint_url} answered {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PersistenceError(f"Request to {self.endpoint_url} failed: {exc}") from exc

        payload = response.json()
        if not isinstance(payload, list):
            raise PersistenceError(f"{self.endpoint_url} did not return a list")
        logger.debug("Fetched {} entities from {}", len(payload), self.endpoint_url)
        return payload


__all__ = [
    "PersistenceError",
    "RestClient",
    "close_shared_clients",
    "normalize_host_url",
    "shared_client",
]
