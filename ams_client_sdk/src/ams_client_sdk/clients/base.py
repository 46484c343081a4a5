from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..http_client import HttpClient


@dataclass
class RetryableMutation:
    """Manual retry handle for mutation calls; replays the same payload."""

    execute_fn: Callable[[], Any]

    def retry(self) -> Any:
        return self.execute_fn()


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)
