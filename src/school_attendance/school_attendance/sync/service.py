"""Full-snapshot backup and restore.

``push`` sends the entire store and the remote replaces everything it holds;
``pull`` fetches the entire remote document and replaces every collection it
contains, dropping local changes that were never pushed. There is no diffing
and no versioning: the last whole-database write wins.

Transport and payload failures never escape: they are logged and reported as
``False``, leaving local state untouched.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

import requests

from ..common.datetime_utils import format_sync_timestamp, now_local
from ..core.exceptions import SyncError
from ..persistence.codec import decode_remote, encode_remote
from ..store.store import DomainStore
from .client import SyncClient

logger = logging.getLogger(__name__)


class SyncService:
    def __init__(
        self,
        store: DomainStore,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        auto_push: bool = True,
        clock: Callable = now_local,
    ):
        self._store = store
        self._session = session or requests.Session()
        self._timeout = timeout
        self._auto_push = bool(auto_push)
        self._clock = clock
        self._in_flight = 0
        self._in_flight_lock = threading.Lock()

    @property
    def is_syncing(self) -> bool:
        with self._in_flight_lock:
            return self._in_flight > 0

    @property
    def last_sync(self) -> str:
        return self._store.last_sync

    @property
    def endpoint(self) -> str:
        return self._store.remote_endpoint

    def set_endpoint(self, url: str) -> None:
        self._store.set_remote_endpoint(url)

    def _client(self) -> Optional[SyncClient]:
        endpoint = self._store.remote_endpoint
        if not endpoint:
            return None
        return SyncClient(endpoint, session=self._session, timeout=self._timeout)

    def _begin(self) -> None:
        with self._in_flight_lock:
            self._in_flight += 1

    def _end(self) -> None:
        with self._in_flight_lock:
            self._in_flight -= 1

    def _stamp(self) -> str:
        return format_sync_timestamp(self._clock())

    def push(self, *, silent: bool = False) -> bool:
        client = self._client()
        if client is None:
            logger.info("Push skipped: no remote endpoint configured")
            return False

        logger.debug("Push to %s started", client.endpoint)
        self._begin()
        try:
            # Read the live store now, not whatever existed when the push was requested.
            payload = encode_remote(self._store.snapshot())
            client.write(payload)
        except SyncError as e:
            logger.warning("Push to %s failed: %s", client.endpoint, e)
            return False
        finally:
            self._end()

        self._store.mark_synced(self._stamp())
        logger.log(logging.DEBUG if silent else logging.INFO, "Pushed full snapshot to %s", client.endpoint)
        return True

    def pull(self) -> bool:
        client = self._client()
        if client is None:
            logger.info("Pull skipped: no remote endpoint configured")
            return False

        logger.debug("Pull from %s started", client.endpoint)
        self._begin()
        try:
            collections = decode_remote(client.read())
        except SyncError as e:
            logger.warning("Pull from %s failed: %s", client.endpoint, e)
            return False
        finally:
            self._end()

        self._store.replace_collections(**collections, last_sync=self._stamp())
        logger.info("Pulled %s from %s", ", ".join(sorted(collections)) or "nothing", client.endpoint)
        return True

    def trigger_push(self) -> bool:
        """Hook called after a mutation worth backing up."""

        if not self._auto_push:
            return False
        return self.push(silent=True)

    def startup_pull(self) -> bool:
        if not self.endpoint:
            return False
        ok = self.pull()
        if not ok:
            logger.warning("Startup pull did not complete; continuing with local data")
        return ok
