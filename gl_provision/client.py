"""GitLab REST client that normalizes responses against an expected status code."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from gl_provision.models import (
    API_V4,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    ApiResponse,
)


class GitLabClient:
    """Thin wrapper around GitLab REST API v4 and the OAuth token endpoint.

    Every call names the status code it expects. The returned ``ApiResponse``
    only carries a decoded JSON body when that status was observed, so callers
    decide what an unexpected status means for them.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        insecure: bool = False,
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.session.verify = not insecure
        self.insecure = insecure
        self.max_retries = max_retries
        self.timeout = timeout
        self.logger = logging.getLogger("gl-provision")
        if insecure:
            self.logger.warning(f"TLS certificate verification is disabled for {self.base_url}")
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        """Authenticate all further calls with the given bearer token."""
        self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, endpoint: str, expected_status: int, api: bool = True, **kwargs) -> ApiResponse:
        """Make an HTTP request, retrying transient failures when retries are enabled."""
        url = f"{self.api_url if api else self.base_url}{endpoint}"
        kwargs.setdefault("timeout", self.timeout)

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(
                    f"{method.upper()} {url} {kwargs.get('params') or ''} "
                    f"(attempt {attempt + 1}/{self.max_retries + 1})"
                )
                resp = self.session.request(method, url, **kwargs)
            except requests.exceptions.ConnectionError as e:
                if attempt < self.max_retries:
                    wait_time = RETRY_BACKOFF_FACTOR * (2**attempt)
                    self.logger.warning(f"Connection error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                    continue
                raise

            if resp.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                wait_time = self._calculate_backoff(resp, attempt)
                self.logger.warning(f"Retryable error {resp.status_code}, waiting {wait_time:.1f}s before retry")
                time.sleep(wait_time)
                continue

            return self._normalize(resp, expected_status)

        raise RuntimeError("Unexpected retry loop exit")

    def _normalize(self, resp: requests.Response, expected_status: int) -> ApiResponse:
        response = ApiResponse(status=resp.status_code, status_text=resp.reason or "")
        if resp.status_code == expected_status:
            try:
                response.json = resp.json()
            except ValueError:
                self.logger.debug(f"Expected status {expected_status} returned without a JSON body")
        else:
            self.logger.debug(f"Unexpected status {resp.status_code} (expected {expected_status}): {resp.text[:500]}")
        return response

    def _calculate_backoff(self, resp: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header for 429s."""
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # Fall through to exponential backoff
        return RETRY_BACKOFF_FACTOR * (2**attempt)

    def get_json(self, endpoint: str, expected_status: int = 200, params: dict | None = None) -> ApiResponse:
        return self._request("GET", endpoint, expected_status, params=params)

    def post_json(self, endpoint: str, data: Any, expected_status: int = 201) -> ApiResponse:
        return self._request("POST", endpoint, expected_status, json=data)

    def post_form(self, endpoint: str, data: dict, expected_status: int = 201, api: bool = True) -> ApiResponse:
        return self._request("POST", endpoint, expected_status, api=api, data=data)

    def put_form(self, endpoint: str, data: dict, expected_status: int = 200) -> ApiResponse:
        return self._request("PUT", endpoint, expected_status, data=data)

    def delete(self, endpoint: str, expected_status: int = 202) -> ApiResponse:
        return self._request("DELETE", endpoint, expected_status)
