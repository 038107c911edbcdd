"""HTTP transport to the spreadsheet web-app.

Both operations are a single ``POST`` to the endpoint carrying a JSON body. The
web-app reads the raw request body, so it is sent as ``text/plain``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import requests

from ..core.exceptions import SyncError

_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}


class SyncClient:
    def __init__(self, endpoint: str, *, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self._endpoint = endpoint
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _post(self, body: dict):
        try:
            return self._session.post(
                self._endpoint,
                data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
                headers=_HEADERS,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise SyncError(f"Request to {self._endpoint} failed: {e}") from e

    def write(self, data: dict) -> None:
        """Ask the remote to replace all of its contents with ``data``.

        The response is not inspected: a request that went out is a success.
        """

        self._post({"action": "write", "data": data})

    def read(self) -> dict[str, Any]:
        """Fetch the remote's full contents as one document."""

        response = self._post({"action": "read"})
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise SyncError(f"Remote answered {response.status_code}") from e

        try:
            doc = response.json()
        except ValueError as e:
            raise SyncError("Remote answered with a non-JSON body") from e

        if not isinstance(doc, dict):
            raise SyncError("Remote answered with a non-object document")
        return doc
