from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, TypeVar

import requests

from .errors import NetworkError, RemoteError, ServerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Source = Literal["remote", "local"]


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """
    Outcome of one accessor call.

    ``source`` says which path produced ``data``; ``error`` is the remote
    failure that caused a local fallback, if any.
    """

    data: T
    source: Source
    error: RemoteError | None = None

    @property
    def degraded(self) -> bool:
        return self.source == "local"


def _error_message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, str) and err.strip():
            return err
    return f"Server error: {resp.status_code}"


class RemoteFirstAccessor:
    """
    Issues exactly one HTTP request per call. If it fails (transport error,
    timeout or non-2xx) and a fallback was supplied, the fallback runs instead
    and its result is returned; otherwise the failure is raised. There are no
    retries, and the two paths never both run for the same call.
    """

    def __init__(self, base_url: str, *, timeout_s: float = 5.0, session: requests.Session | None = None) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _request(self, method: str, url: str, body: Any | None) -> Any:
        try:
            resp = self.session.request(method, url, json=body, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise ServerError(resp.status_code, _error_message(resp))

        if not resp.content:
            return None
        # The remote side already applied the call; a malformed body must not
        # trigger the fallback.
        try:
            return resp.json()
        except ValueError:
            logger.warning("REMOTE CALL: %s %s returned a non-JSON body", method, url)
            return resp.text

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any | None = None,
        fallback: Callable[[], T] | None = None,
    ) -> CallResult[Any]:
        method = method.upper()
        url = self.url_for(endpoint)
        try:
            data = self._request(method, url, body)
        except RemoteError as e:
            if fallback is None:
                logger.debug("REMOTE CALL: %s %s failed without fallback: %s", method, url, e)
                raise
            logger.warning("REMOTE CALL: %s %s failed (%s); using local store", method, url, e)
            return CallResult(data=fallback(), source="local", error=e)
        return CallResult(data=data, source="remote")
