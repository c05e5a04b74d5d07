from __future__ import annotations

import base64
import json

import httpx

from bitbucket_client import BitbucketClient, ClientConfig

BASE_URL = "https://api.example.test/2.0"


def _client(handler, **cfg_kwargs) -> BitbucketClient:
    cfg = ClientConfig(base_url=cfg_kwargs.pop("base_url", BASE_URL), **cfg_kwargs)
    return BitbucketClient(cfg, transport=httpx.MockTransport(handler))


def _capture():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    return seen, handler


def test_relative_path_joined_with_single_slash() -> None:
    seen, handler = _capture()
    for base, path in (
            ("https://api.example.test/2.0", "user"),
            ("https://api.example.test/2.0/", "/user"),
            ("https://api.example.test/2.0//", "//user"),
            ("https://api.example.test/2.0", "  /user "),
    ):
        with _client(handler, base_url=base) as client:
            client.do_json("GET", path)
    assert [str(r.url) for r in seen] == [f"{BASE_URL}/user"] * 4


def test_relative_path_gets_query_params() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("GET", "/repositories/ws", {"q": 'name ~ "api"', "sort": "-updated_on"})
    url = seen[0].url
    assert url.path == "/2.0/repositories/ws"
    assert url.params["q"] == 'name ~ "api"'
    assert url.params["sort"] == "-updated_on"


def test_absolute_url_keeps_existing_query_and_adds_params() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("GET", "https://other.example.test/x?from=next", {"page": 2})
    url = seen[0].url
    assert url.host == "other.example.test"
    assert url.params["from"] == "next"
    assert url.params["page"] == "2"


def test_absolute_url_params_are_added_not_replaced() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("GET", f"{BASE_URL}/x?q=a", {"q": "b"})
    assert seen[0].url.params.get_list("q") == ["a", "b"]


def test_absolute_url_without_params_is_used_as_is() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("GET", "https://api.example.test/2.0/items?page=3&pagelen=10")
    assert str(seen[0].url) == "https://api.example.test/2.0/items?page=3&pagelen=10"


def test_fixed_headers_always_sent() -> None:
    seen, handler = _capture()
    with _client(handler, user_agent="bb-cli/test") as client:
        client.do_json("GET", "/user")
    assert seen[0].headers["accept"] == "application/json"
    assert seen[0].headers["user-agent"] == "bb-cli/test"


def test_basic_auth_when_username_configured() -> None:
    seen, handler = _capture()
    with _client(handler, token="secret", username=" me@example.test ") as client:
        client.do_json("GET", "/user")
        client.do_json("GET", "/user")
    expected = "Basic " + base64.b64encode(b"me@example.test:secret").decode("ascii")
    assert [r.headers["authorization"] for r in seen] == [expected, expected]


def test_bearer_auth_without_username() -> None:
    seen, handler = _capture()
    with _client(handler, token="secret") as client:
        client.do_json("GET", "/user")
    assert seen[0].headers["authorization"] == "Bearer secret"


def test_no_authorization_without_token() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("GET", "/user")
    with _client(handler, username="me") as client:
        client.do_json("GET", "/user")
    assert all("authorization" not in r.headers for r in seen)


def test_content_type_only_with_body() -> None:
    seen, handler = _capture()
    with _client(handler) as client:
        client.do_json("POST", "/issues", json_body={"title": "t"})
        client.do_json("GET", "/issues")
    assert seen[0].headers["content-type"] == "application/json"
    assert json.loads(seen[0].content) == {"title": "t"}
    assert "content-type" not in seen[1].headers


def test_request_hands_response_to_caller() -> None:
    _, handler = _capture()
    with _client(handler) as client:
        r = client.request("GET", "/user")
        try:
            assert r.status_code == 200
            assert json.loads(r.read()) == {"ok": True}
        finally:
            r.close()


def test_blank_base_url_uses_bitbucket_cloud() -> None:
    cfg = ClientConfig(base_url="  ")
    assert cfg.base_url == "https://api.bitbucket.org/2.0"


def test_auth_mode() -> None:
    assert ClientConfig(token="t", username="u").auth_mode == "basic"
    assert ClientConfig(token="t").auth_mode == "bearer"
    assert ClientConfig(username="u").auth_mode == "none"
