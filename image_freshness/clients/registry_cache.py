import logging
import threading
from functools import partial
from typing import Callable

from image_freshness.clients.registry_client import REQUEST_TIMEOUT, RegistryClient
from image_freshness.errors import RegistryConnectionError
from image_freshness.models.image_reference import registry_url

logger = logging.getLogger(__name__)

OpenClient = Callable[[str, str, str], RegistryClient]


class RegistryClientCache:
    """
    Keeps one open client per registry host for the lifetime of a run.

    Clients are never evicted. A failed connection is not cached, so a later
    request for the same host tries again. Concurrent first requests for one
    host wait on a per-host lock and share a single connection.
    """

    def __init__(self, open_client: OpenClient | None = None, timeout: float = REQUEST_TIMEOUT):
        self.open_client: OpenClient = open_client or partial(RegistryClient, timeout=timeout)
        self._clients: dict[str, RegistryClient] = {}
        self._host_locks: dict[str, threading.Lock] = {}
        self._lock: threading.Lock = threading.Lock()

    def __contains__(self, host: str) -> bool:
        with self._lock:
            return host in self._clients

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def get(self, host: str) -> RegistryClient:
        with self._lock:
            client = self._clients.get(host)
            if client is not None:
                logger.debug(f"hit for {host!r}: {client!r}")
                return client
            host_lock = self._host_locks.setdefault(host, threading.Lock())

        with host_lock:
            with self._lock:
                client = self._clients.get(host)
            if client is not None:
                logger.debug(f"hit for {host!r}: {client!r}")
                return client

            url = registry_url(host)
            try:
                client = self.open_client(url, "", "")
            except RegistryConnectionError:
                raise
            except Exception as e:
                raise RegistryConnectionError(url, str(e)) from e

            with self._lock:
                self._clients[host] = client
            logger.debug(f"miss for {host!r}: {client!r}")
            return client
