from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import ApiError, DecodeError, NetworkError
from .transport import QueryParamsLike, Transport

MAX_ERROR_BODY_BYTES = 4 * 1024


@dataclass
class ListPage:
    values: list[Any] = field(default_factory=list)
    next: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "ListPage":
        if not isinstance(data, dict):
            raise DecodeError("decode listing page", f"expected JSON object, got {type(data).__name__}")
        values = data.get("values")
        if values is None:
            values = []
        if not isinstance(values, list):
            raise DecodeError("decode listing page", "field 'values' is not an array")
        next_url = data.get("next")
        if next_url is None:
            next_url = ""
        if not isinstance(next_url, str):
            raise DecodeError("decode listing page", "field 'next' is not a string")
        return cls(values=values, next=next_url)


def _read_limited(r: httpx.Response, limit: int) -> str:
    buf = bytearray()
    try:
        for chunk in r.iter_bytes():
            buf.extend(chunk)
            if len(buf) >= limit:
                break
    except httpx.RequestError:
        # keep what was read before the stream failed
        pass
    return bytes(buf[:limit]).decode("utf-8", errors="replace").strip()


def _optional_fields(**fields: str | None) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for key, value in fields.items():
        trimmed = (value or "").strip()
        if trimmed:
            body[key] = trimmed
    return body


def issue_fields(
        *,
        title: str | None = None,
        content: str | None = None,
        state: str | None = None,
        kind: str | None = None,
        priority: str | None = None,
) -> dict[str, Any]:
    body = _optional_fields(title=title, state=state, kind=kind, priority=priority)
    raw = (content or "").strip()
    if raw:
        body["content"] = {"raw": raw}
    return body


class BitbucketClient:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._t = Transport(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._t.config

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> "BitbucketClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
            self,
            method: str,
            path: str,
            params: QueryParamsLike = None,
            json_body: Any | None = None,
    ) -> httpx.Response:
        """Send one request and return the unread response.

        `path` is either relative to the configured base URL or an absolute
        http(s) URL, in which case `params` are appended to its query string.
        The caller owns the response and must close it.
        """
        return self._t.request(method, path, params=params, json_body=json_body)

    def do_json(
            self,
            method: str,
            path: str,
            params: QueryParamsLike = None,
            json_body: Any | None = None,
            *,
            decode: bool = True,
    ) -> Any:
        """Send a request and decode its JSON body.

        Raises ApiError for status >= 400, DecodeError for an unparsable
        success body and NetworkError when no response was received. With
        decode=False the body is drained and None is returned.
        """
        r = self.request(method, path, params=params, json_body=json_body)
        try:
            if r.status_code >= 400:
                raise ApiError(r.status_code, _read_limited(r, MAX_ERROR_BODY_BYTES))
            try:
                raw = r.read()
            except httpx.RequestError as e:
                raise NetworkError(f"read response: {e}") from e
            if not decode:
                return None
            try:
                return json.loads(raw)
            except ValueError as e:
                raise DecodeError("decode response", str(e)) from e
        finally:
            r.close()

    def get_all_values(self, path: str, params: QueryParamsLike = None) -> list[Any]:
        """Follow `next` links from `path` and concatenate every page's values.

        `params` only apply to the first request. Any failing page fails the
        whole call.
        """
        next_ref = path
        current = params
        values: list[Any] = []
        while next_ref:
            page = ListPage.from_json(self.do_json("GET", next_ref, current))
            values.extend(page.values)
            next_ref = page.next
            current = None
        return values

    def list_values(self, path: str, params: QueryParamsLike = None, *, all_pages: bool = False) -> list[Any]:
        if all_pages:
            return self.get_all_values(path, params)
        return ListPage.from_json(self.do_json("GET", path, params)).values

    # --- endpoints ---
    def repositories(self, workspace: str, *, params: QueryParamsLike = None, all_pages: bool = False) -> list[Any]:
        return self.list_values(f"/repositories/{workspace}", params, all_pages=all_pages)

    def pull_requests(
            self,
            workspace: str,
            repo: str,
            *,
            params: QueryParamsLike = None,
            all_pages: bool = False,
    ) -> list[Any]:
        return self.list_values(f"/repositories/{workspace}/{repo}/pullrequests", params, all_pages=all_pages)

    def create_pull_request(
            self,
            workspace: str,
            repo: str,
            *,
            title: str,
            source: str,
            destination: str,
            description: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "title": title,
            "source": {"branch": {"name": source}},
            "destination": {"branch": {"name": destination}},
        }
        body.update(_optional_fields(description=description))
        data = self.do_json("POST", f"/repositories/{workspace}/{repo}/pullrequests", json_body=body)
        return data if isinstance(data, dict) else {"raw": data}

    def pipelines(
            self,
            workspace: str,
            repo: str,
            *,
            params: QueryParamsLike = None,
            all_pages: bool = False,
    ) -> list[Any]:
        return self.list_values(f"/repositories/{workspace}/{repo}/pipelines", params, all_pages=all_pages)

    def trigger_pipeline(self, workspace: str, repo: str, *, branch: str) -> dict[str, Any]:
        body = {
            "target": {
                "type": "pipeline_ref_target",
                "ref_type": "branch",
                "ref_name": branch,
            },
        }
        data = self.do_json("POST", f"/repositories/{workspace}/{repo}/pipelines", json_body=body)
        return data if isinstance(data, dict) else {"raw": data}

    def issues(
            self,
            workspace: str,
            repo: str,
            *,
            params: QueryParamsLike = None,
            all_pages: bool = False,
    ) -> list[Any]:
        return self.list_values(f"/repositories/{workspace}/{repo}/issues", params, all_pages=all_pages)

    def create_issue(self, workspace: str, repo: str, fields: dict[str, Any]) -> dict[str, Any]:
        data = self.do_json("POST", f"/repositories/{workspace}/{repo}/issues", json_body=fields)
        return data if isinstance(data, dict) else {"raw": data}

    def update_issue(self, workspace: str, repo: str, issue_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        data = self.do_json("PUT", f"/repositories/{workspace}/{repo}/issues/{int(issue_id)}", json_body=fields)
        return data if isinstance(data, dict) else {"raw": data}
