"""Gist publishing with requests replaced by an in-memory double."""

from __future__ import annotations

import pytest
import requests

from charisma.errors import PublishError
from charisma.gist import DEFAULT_DESCRIPTION, GIST_API_URL, GistPublisher, build_payload


class FakeResponse:
    def __init__(self, status=201, data=None):
        self.status_code = status
        self._data = data if data is not None else {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error: Unauthorized")

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


class FakeHTTP:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response


def test_payload_shape():
    assert build_payload("a.py", "x = 1", "", is_private=True) == {
        "description": DEFAULT_DESCRIPTION,
        "public": False,
        "files": {"a.py": {"content": "x = 1"}},
    }


def test_publish_success():
    http = FakeHTTP(FakeResponse(201, {"html_url": "https://gist.github.com/abc",
                                       "id": "abc", "public": True}))
    result = GistPublisher(session=http).publish(
        "generated/sort_list.py", "print(1)\n", "ghp_secret", "my sort", is_private=False)

    assert result.html_url == "https://gist.github.com/abc"
    assert result.gist_id == "abc"
    (url, kwargs) = http.calls[0]
    assert url == GIST_API_URL
    assert kwargs["headers"]["Authorization"] == "Bearer ghp_secret"
    assert kwargs["json"] == {
        "description": "my sort",
        "public": True,
        "files": {"sort_list.py": {"content": "print(1)\n"}},
    }


def test_http_error_is_publish_error():
    http = FakeHTTP(FakeResponse(401, {"message": "Bad credentials"}))
    with pytest.raises(PublishError, match="401"):
        GistPublisher(session=http).publish("a.py", "x", "bad")


def test_network_error_is_publish_error():
    http = FakeHTTP(exc=requests.ConnectionError("Name or service not known"))
    with pytest.raises(PublishError, match="service not known"):
        GistPublisher(session=http).publish("a.py", "x", "tok")
    assert len(http.calls) == 1


def test_response_without_url():
    http = FakeHTTP(FakeResponse(201, {"id": "abc"}))
    with pytest.raises(PublishError, match="URL"):
        GistPublisher(session=http).publish("a.py", "x", "tok")


def test_unparseable_response():
    http = FakeHTTP(FakeResponse(201, ValueError("Expecting value")))
    with pytest.raises(PublishError):
        GistPublisher(session=http).publish("a.py", "x", "tok")
