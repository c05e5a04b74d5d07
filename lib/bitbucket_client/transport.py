from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from .config_types import ClientConfig
from .errors import NetworkError

logger = logging.getLogger(__name__)

QueryParamsLike = Mapping[str, Any] | None


def is_absolute_url(ref: str) -> bool:
    lowered = ref.lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def merge_query(url: httpx.URL, params: QueryParamsLike) -> httpx.URL:
    """Append params to the query already on url. Existing keys are kept."""
    if not params:
        return url
    extra = httpx.QueryParams({k: v for k, v in params.items() if v is not None})
    if not extra:
        return url
    merged = httpx.QueryParams([*url.params.multi_items(), *extra.multi_items()])
    return url.copy_with(params=merged)


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {
            "User-Agent": cfg.user_agent,
            "Accept": "application/json",
        }
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._client.close()

    def build_url(self, ref: str, params: QueryParamsLike = None) -> httpx.URL:
        if is_absolute_url(ref):
            target = ref
        else:
            target = f"{self._cfg.base_url.rstrip('/')}/{ref.strip().lstrip('/')}"
        try:
            url = httpx.URL(target)
        except httpx.InvalidURL as e:
            raise NetworkError(f"parse URL: {e}") from e
        return merge_query(url, params)

    def _auth(self, headers: dict[str, str]) -> httpx.Auth | None:
        token = self._cfg.token
        if not token:
            return None
        if self._cfg.username:
            return httpx.BasicAuth(self._cfg.username, token)
        headers["Authorization"] = f"Bearer {token}"
        return None

    def request(
            self,
            method: str,
            ref: str,
            *,
            params: QueryParamsLike = None,
            json_body: Any | None = None,
    ) -> httpx.Response:
        url = self.build_url(ref, params)
        headers: dict[str, str] = {}
        content = None
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        auth = self._auth(headers)

        try:
            req = self._client.build_request(method.upper(), url, content=content, headers=headers)
        except httpx.InvalidURL as e:
            raise NetworkError(f"build request: {e}") from e

        logger.debug("%s %s", req.method, req.url)
        try:
            r = self._client.send(req, auth=auth, stream=True)
        except httpx.RequestError as e:
            raise NetworkError(f"execute request: {e}") from e
        logger.debug("%s %s -> %s", req.method, req.url, r.status_code)
        return r
