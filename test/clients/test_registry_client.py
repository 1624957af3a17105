import json

import pytest
import requests

from image_freshness.clients.registry_client import RegistryClient
from image_freshness.errors import RegistryConnectionError, TagListingError

BASE_URL = "https://registry.example.io"
TAGS_URL = f"{BASE_URL}/v2/team/app/tags/list"


def make_response(status_code, body=None, headers=None, url=""):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    response.headers.update(headers or {})
    response.url = url
    return response


class FakeSession:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, headers=None, params=None, auth=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "auth": auth, "timeout": timeout})
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, list):
            return route.pop(0) if len(route) > 1 else route[0]
        return route


@pytest.fixture
def session(monkeypatch):
    fake = FakeSession({f"{BASE_URL}/v2/": make_response(200)})
    monkeypatch.setattr(requests, "Session", lambda: fake)
    return fake


def test_open_pings_registry(session):
    client = RegistryClient(BASE_URL + "/", timeout=5)
    assert client.base_url == BASE_URL
    assert session.calls[0]["url"] == f"{BASE_URL}/v2/"
    assert session.calls[0]["timeout"] == 5


def test_open_accepts_auth_challenge(session):
    session.routes[f"{BASE_URL}/v2/"] = make_response(401, headers={"WWW-Authenticate": 'Bearer realm="x"'})
    RegistryClient(BASE_URL)


@pytest.mark.parametrize("route", [make_response(500), make_response(401), requests.ConnectionError("dns failure")])
def test_open_failure(session, route):
    session.routes[f"{BASE_URL}/v2/"] = route
    with pytest.raises(RegistryConnectionError) as exc:
        RegistryClient(BASE_URL)
    assert exc.value.registry == BASE_URL


def test_list_tags(session):
    session.routes[TAGS_URL] = make_response(200, {"name": "team/app", "tags": ["1.0.0", "latest"]})
    client = RegistryClient(BASE_URL, timeout=3)
    assert client.list_tags("team/app") == ["1.0.0", "latest"]
    assert all(call["timeout"] == 3 for call in session.calls)


def test_list_tags_null_tags(session):
    session.routes[TAGS_URL] = make_response(200, {"name": "team/app", "tags": None})
    assert RegistryClient(BASE_URL).list_tags("team/app") == []


def test_list_tags_follows_pagination(session):
    next_url = f"{TAGS_URL}?last=b&n=2"
    session.routes[TAGS_URL] = make_response(
        200, {"tags": ["a", "b"]}, headers={"Link": '</v2/team/app/tags/list?last=b&n=2>; rel="next"'}
    )
    session.routes[next_url] = make_response(200, {"tags": ["c"]})
    assert RegistryClient(BASE_URL).list_tags("team/app") == ["a", "b", "c"]
    assert session.calls[-1]["url"] == next_url


def test_list_tags_negotiates_anonymous_token(session):
    challenge = 'Bearer realm="https://auth.example.io/token",service="registry.example.io"'
    session.routes[TAGS_URL] = [
        make_response(401, headers={"WWW-Authenticate": challenge}),
        make_response(200, {"tags": ["1.0.0"]}),
    ]
    session.routes["https://auth.example.io/token"] = make_response(200, {"token": "anon-token"})

    client = RegistryClient(BASE_URL)
    assert client.list_tags("team/app") == ["1.0.0"]

    token_call = session.calls[2]
    assert token_call["params"] == {"service": "registry.example.io", "scope": "repository:team/app:pull"}
    assert token_call["auth"] is None
    assert session.calls[3]["headers"] == {"Authorization": "Bearer anon-token"}


def test_list_tags_reuses_token(session):
    challenge = 'Bearer realm="https://auth.example.io/token",service="registry.example.io"'
    session.routes[TAGS_URL] = [
        make_response(401, headers={"WWW-Authenticate": challenge}),
        make_response(200, {"tags": ["1.0.0"]}),
    ]
    session.routes["https://auth.example.io/token"] = make_response(200, {"access_token": "anon-token"})

    client = RegistryClient(BASE_URL)
    client.list_tags("team/app")
    client.list_tags("team/app")

    token_calls = [c for c in session.calls if c["url"] == "https://auth.example.io/token"]
    assert len(token_calls) == 1
    assert session.calls[-1]["headers"] == {"Authorization": "Bearer anon-token"}


@pytest.mark.parametrize("route", [make_response(404), make_response(401), requests.Timeout("timed out")])
def test_list_tags_failure(session, route):
    session.routes[TAGS_URL] = route
    client = RegistryClient(BASE_URL)
    with pytest.raises(TagListingError) as exc:
        client.list_tags("team/app")
    assert exc.value.repository == "team/app"


def test_list_tags_refreshes_expired_token(session):
    challenge = 'Bearer realm="https://auth.example.io/token",service="registry.example.io"'
    session.routes[TAGS_URL] = [
        make_response(401, headers={"WWW-Authenticate": challenge}),
        make_response(200, {"tags": ["1.0.0"]}),
        make_response(401, headers={"WWW-Authenticate": challenge}),
        make_response(200, {"tags": ["1.0.0", "1.1.0"]}),
    ]
    session.routes["https://auth.example.io/token"] = [
        make_response(200, {"token": "first-token"}),
        make_response(200, {"token": "second-token"}),
    ]

    client = RegistryClient(BASE_URL)
    assert client.list_tags("team/app") == ["1.0.0"]
    assert client.list_tags("team/app") == ["1.0.0", "1.1.0"]

    token_calls = [c for c in session.calls if c["url"] == "https://auth.example.io/token"]
    assert len(token_calls) == 2
    assert session.calls[-2]["url"] == "https://auth.example.io/token"
    assert session.calls[-1]["headers"] == {"Authorization": "Bearer second-token"}


@pytest.mark.parametrize("challenge,token_body", [
    ('Bearer service="registry.example.io"', {"token": "unused"}),
    ('Bearer realm="https://auth.example.io/token"', {}),
])
def test_token_failure_names_repository(session, challenge, token_body):
    session.routes[TAGS_URL] = make_response(401, headers={"WWW-Authenticate": challenge})
    session.routes["https://auth.example.io/token"] = make_response(200, token_body)

    client = RegistryClient(BASE_URL)
    with pytest.raises(TagListingError, match="Unable to fetch tags for team/app:") as exc:
        client.list_tags("team/app")
    assert exc.value.repository == "team/app"
