"""HTTP client for the Keep API."""

import json
import logging
import time
from typing import Any

import httpx

from keep_provider.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from keep_provider.errors import APIError, DecodeError, TransportError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-KEY"


class KeepClient:
    """Thin JSON transport shared by every resource.

    Holds only fixed configuration, so one instance can serve all resources.
    Errors are never retried.
    """

    def __init__(
        self,
        api_url: str = "",
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            self._headers[API_KEY_HEADER] = api_key

        self._http = httpx.Client(
            base_url=self._api_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

        logger.debug(
            f"Created Keep API client: base_url={self._api_url}, "
            f"api_key_set={bool(api_key)}, headers={self.loggable_headers()}"
        )

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def timeout(self) -> float:
        """Deadline in seconds for a whole request, body included."""
        return self._timeout

    def loggable_headers(self) -> dict[str, str]:
        """Headers with the API key redacted."""
        return {
            k: ("[REDACTED]" if k == API_KEY_HEADER else v)
            for k, v in self._headers.items()
        }

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "KeepClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(self, method: str, path: str, body: Any = None) -> bytes:
        """Send a request and return the raw response body.

        Raises APIError for status >= 400 and TransportError for network
        failures.
        """
        content: bytes | None = None
        if body is not None:
            try:
                content = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise TransportError(f"error marshaling request body: {e}") from e

        logger.debug(f"Sending {method} {self._api_url}{path}")

        # httpx timeouts apply per phase and restart with every chunk read;
        # the deadline bounds the whole exchange.
        deadline = time.monotonic() + self._timeout
        chunks: list[bytes] = []
        try:
            with self._http.stream(method, path, content=content) as response:
                for chunk in response.iter_bytes():
                    self._check_deadline(deadline, method, path)
                    chunks.append(chunk)
        except httpx.HTTPError as e:
            raise TransportError(f"error executing {method} {path}: {e}") from e
        self._check_deadline(deadline, method, path)

        raw = b"".join(chunks)
        logger.debug(f"Received {response.status_code} for {method} {path}")

        if response.status_code >= 400:
            text = raw.decode(response.charset_encoding or "utf-8", errors="replace")
            raise APIError(method, path, response.status_code, text)

        return raw

    def _check_deadline(self, deadline: float, method: str, path: str) -> None:
        if time.monotonic() > deadline:
            raise TransportError(f"{method} {path} exceeded the {self._timeout}s request timeout")

    def request_json(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request and decode the JSON response body."""
        raw = self.request(method, path, body)
        try:
            return json.loads(raw)
        except ValueError as e:
            raise DecodeError(
                f"error parsing response of {method} {path}: {e}",
                body=raw.decode("utf-8", errors="replace"),
            ) from e

    def get(self, path: str) -> Any:
        return self.request_json("GET", path)

    def post(self, path: str, body: Any) -> Any:
        return self.request_json("POST", path, body)

    def put(self, path: str, body: Any) -> Any:
        return self.request_json("PUT", path, body)

    def delete(self, path: str) -> bytes:
        """DELETE returns the raw body; callers rarely need it decoded."""
        return self.request("DELETE", path)
