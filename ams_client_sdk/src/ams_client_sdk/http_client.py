from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

ResponseHook = Callable[[requests.Response], None]
Payload = dict[str, Any] | list[Any] | None

_IDEMPOTENT_READS = {"GET", "HEAD"}


def collection_root(path: str) -> str:
    """``/api/Assets/7/assign`` -> ``/api/assets``; cache entries are grouped by controller."""
    segments = [segment for segment in path.split("?", 1)[0].strip("/").split("/") if segment]
    return "/" + "/".join(segments[:2]).lower()


@dataclass(frozen=True)
class NormalizedError:
    code: str
    message: str
    trace_id: str | None
    type: str


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class _CacheEntry:
    root: str
    expires_at: float
    payload: Payload


@dataclass
class ResponseCache:
    """Short-lived GET cache. Any mutation drops every entry under the same controller."""

    ttl_seconds: float
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Payload:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if time.monotonic() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.payload

    def put(self, key: str, path: str, payload: Payload) -> None:
        if self.ttl_seconds <= 0 or payload is None:
            return
        now = time.monotonic()
        self.sweep(now)
        self._entries[key] = _CacheEntry(collection_root(path), now + self.ttl_seconds, payload)

    def sweep(self, now: float | None = None) -> int:
        """Drops expired entries; each distinct search or filter combination adds a key."""
        now = time.monotonic() if now is None else now
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate(self, paths: list[str]) -> int:
        roots = {collection_root(path) for path in paths}
        doomed = [key for key, entry in self._entries.items() if entry.root in roots]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()


@dataclass
class HttpClient:
    """Transport for the AMS API: pooled session, bounded read retries, GET cache and typed errors."""

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    after_response: ResponseHook | None = None
    enable_get_cache: bool = True
    cache: ResponseCache | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            pool = HTTPAdapter(pool_connections=self.config.max_connections, pool_maxsize=self.config.max_connections)
            self.session.mount("http://", pool)
            self.session.mount("https://", pool)
        if self.cache is None:
            self.cache = ResponseCache(ttl_seconds=self.config.cache_ttl_seconds)

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        use_get_cache: bool = True,
        invalidate_paths: list[str] | None = None,
    ) -> Payload:
        verb = method.upper()
        trace = self.trace or TraceContext()
        request_headers = {"Accept": "application/json", **(headers or {}), TRACE_HEADER: trace.ensure()}

        cache_key = None
        if verb == "GET" and use_get_cache and self.enable_get_cache:
            cache_key = json.dumps(
                {"path": path, "auth": request_headers.get("Authorization"), "params": params or {}},
                sort_keys=True,
                default=str,
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.last_operation = LastOperation(module, operation, 0, "success(cache)", trace.trace_id)
                return cached

        started = time.monotonic()
        try:
            response = self._send(verb, path, request_headers, json_body, params)
        except TransportError as exc:
            exc.trace_id = trace.trace_id
            self._finish(module, operation, started, "error", trace.trace_id)
            raise

        if self.after_response:
            self.after_response(response)
        trace.update_from_headers(response.headers)

        if not response.ok:
            payload = _error_payload(response)
            trace.update_from_payload(payload)
            self._finish(module, operation, started, "error", trace.trace_id)
            raise map_error(response.status_code, payload, trace.trace_id)

        parsed: Payload = response.json() if response.content else None
        if cache_key is not None:
            self.cache.put(cache_key, path, parsed)
        elif verb not in _IDEMPOTENT_READS:
            self.cache.invalidate(invalidate_paths or [path])
        self._finish(module, operation, started, "success", trace.trace_id)
        return parsed

    def _send(
        self,
        verb: str,
        path: str,
        headers: dict[str, str],
        json_body: dict[str, Any] | None,
        params: dict[str, Any] | None,
    ) -> requests.Response:
        """Reads are retried on transport failures and 5xx with exponential backoff; writes go out once."""
        url = urljoin(self.config.api_base_url.rstrip("/") + "/", path.lstrip("/"))
        attempts = self.config.retries + 1 if verb in _IDEMPOTENT_READS else 1
        for attempt in range(1, attempts + 1):
            last = attempt == attempts
            try:
                response = self.session.request(
                    method=verb,
                    url=url,
                    headers=headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if last:
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=None,
                        status_code=0,
                    ) from exc
                logger.warning("%s %s attempt %d/%d failed: %s", verb, path, attempt, attempts, exc)
            else:
                if response.status_code < 500 or last:
                    return response
                logger.warning("%s %s attempt %d/%d returned %d", verb, path, attempt, attempts, response.status_code)
            time.sleep(self.config.retry_backoff_seconds * (2 ** (attempt - 1)))
        raise RuntimeError("request loop exited without a response")

    def normalize_error(self, error: Exception) -> NormalizedError:
        if not isinstance(error, ApiError):
            return NormalizedError(code="UNKNOWN_ERROR", message=str(error), trace_id=None, type="internal")
        return NormalizedError(
            code=error.code,
            message=error.message,
            trace_id=error.trace_id,
            type=_error_kind(error.status_code),
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def _finish(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        elapsed = int((time.monotonic() - started) * 1000)
        self.last_operation = LastOperation(module, operation, elapsed, result, trace_id)


def _error_payload(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {"message": response.text or response.reason}
    return payload if isinstance(payload, dict) else {"message": str(payload)}


def _error_kind(status_code: int) -> str:
    if status_code <= 0:
        return "network"
    if status_code in {401, 403}:
        return "auth"
    if status_code in {400, 404, 422}:
        return "validation"
    if status_code == 409:
        return "conflict"
    return "internal"
