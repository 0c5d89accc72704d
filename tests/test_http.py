"""
Tests for the aiohttp JSON request helper.
"""

import json

import pytest

from utils.http import HttpStatusError, fetch_json


class FakeResponse:
    def __init__(self, status, body, reason="Error"):
        self.status = status
        self.reason = reason
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def text(self):
        return self._body

    async def json(self, content_type=None):
        return json.loads(self._body) if self._body.strip() else None


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.response


class TestFetchJson:
    @pytest.mark.asyncio
    async def test_returns_object_body(self):
        session = FakeSession(FakeResponse(200, '{"id": "t-1"}'))

        data = await fetch_json(session, "POST", "https://api.test/x", json={"a": 1})

        assert data == {"id": "t-1"}
        assert session.calls == [("POST", "https://api.test/x", {"json": {"a": 1}})]

    @pytest.mark.asyncio
    async def test_error_detail_from_json_body(self):
        session = FakeSession(FakeResponse(400, '{"error": "Invalid audio_url"}'))

        with pytest.raises(HttpStatusError) as exc_info:
            await fetch_json(session, "POST", "https://api.test/x")

        assert exc_info.value.status == 400
        assert exc_info.value.detail == "Invalid audio_url"

    @pytest.mark.asyncio
    async def test_error_detail_from_nested_error(self):
        body = '{"error": {"code": 403, "message": "quotaExceeded"}}'
        with pytest.raises(HttpStatusError, match="quotaExceeded"):
            await fetch_json(FakeSession(FakeResponse(403, body)), "GET", "https://api.test/x")

    @pytest.mark.asyncio
    async def test_error_detail_from_text_body(self):
        with pytest.raises(HttpStatusError) as exc_info:
            await fetch_json(FakeSession(FakeResponse(502, "Bad Gateway\n")), "GET", "https://api.test/x")

        assert exc_info.value.detail == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        with pytest.raises(ValueError):
            await fetch_json(FakeSession(FakeResponse(200, "[1, 2]")), "GET", "https://api.test/x")

    @pytest.mark.asyncio
    async def test_empty_body(self):
        with pytest.raises(ValueError):
            await fetch_json(FakeSession(FakeResponse(200, "")), "GET", "https://api.test/x")
