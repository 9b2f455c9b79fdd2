"""
Unit tests for the templated REST resource client.

Tests:
- URL template resolution and placeholder encoding
- Query serialization
- Request dispatch over httpx
- Error responses
- Callback and awaitable conventions
"""

import asyncio

import httpx
import pytest

from idmgmt.exceptions import ArgumentError, ManagementAPIError
from idmgmt.rest import RestClient, serialize_query


BASE_URL = "https://tenant.test/api/v2"


class TestBuildUrl:
    """Tests for template resolution."""

    def test_fills_placeholders(self):
        client = RestClient(f"{BASE_URL}/users/:id/multifactor/:provider")

        url, query = client.build_url({"id": "123", "provider": "sms"})

        assert url == f"{BASE_URL}/users/123/multifactor/sms"
        assert query == {}

    def test_encodes_placeholder_values(self):
        client = RestClient(f"{BASE_URL}/users/:id")

        url, _ = client.build_url({"id": "auth0|abc/def"})

        assert url == f"{BASE_URL}/users/auth0%7Cabc%2Fdef"

    def test_drops_missing_trailing_placeholders(self):
        client = RestClient(f"{BASE_URL}/users/:id/identities/:provider/:user_id")

        url, _ = client.build_url({"id": "u1"})

        assert url == f"{BASE_URL}/users/u1/identities"

    def test_collection_path_without_params(self):
        client = RestClient(f"{BASE_URL}/users/:id")

        url, query = client.build_url()

        assert url == f"{BASE_URL}/users"
        assert query == {}

    def test_missing_inner_placeholder_raises(self):
        client = RestClient(f"{BASE_URL}/users/:id/multifactor/:provider")

        with pytest.raises(ArgumentError, match="'id'"):
            client.build_url({"provider": "sms"})

    def test_extra_params_become_query(self):
        client = RestClient(f"{BASE_URL}/users/:id")

        url, query = client.build_url({"id": "u1", "fields": "email"})

        assert url == f"{BASE_URL}/users/u1"
        assert query == {"fields": "email"}

    def test_port_is_not_a_placeholder(self):
        client = RestClient("http://localhost:8443/api/v2/user-blocks/:id")

        assert client.placeholders == ("id",)
        url, _ = client.build_url({"id": "u1"})
        assert url == "http://localhost:8443/api/v2/user-blocks/u1"

    def test_invalid_template(self):
        with pytest.raises(ArgumentError):
            RestClient("")


class TestSerializeQuery:
    """Tests for query serialization."""

    def test_lists_joined_without_repeat_params(self):
        pairs = serialize_query({"fields": ["email", "name"]}, repeat_params=False)

        assert pairs == [("fields", "email,name")]

    def test_lists_repeated_with_repeat_params(self):
        pairs = serialize_query({"fields": ["email", "name"]}, repeat_params=True)

        assert pairs == [("fields", "email"), ("fields", "name")]

    def test_booleans_and_none(self):
        pairs = serialize_query({"include_totals": True, "page": 0, "q": None})

        assert pairs == [("include_totals", "true"), ("page", "0")]


class TestDispatch:
    """Tests for requests sent through httpx."""

    @pytest.mark.asyncio
    async def test_get_sends_headers_and_query(self, recorder):
        recorder.respond(200, {"user_id": "u1"})
        client = RestClient(
            f"{BASE_URL}/users/:id",
            headers={"Authorization": "Bearer abc"},
            repeat_params=False,
            transport=recorder.transport,
        )

        result = await client.get({"id": "u1", "fields": ["email", "name"]})

        assert result == {"user_id": "u1"}
        request = recorder.last
        assert request.method == "GET"
        assert request.url.path == "/api/v2/users/u1"
        assert request.url.params.get_list("fields") == ["email,name"]
        assert request.headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_create_with_params_and_body(self, recorder):
        recorder.respond(201, [{"provider": "github"}])
        client = RestClient(f"{BASE_URL}/users/:id/identities/:provider/:user_id", transport=recorder.transport)

        result = await client.create({"id": "u1"}, {"provider": "github", "user_id": "42"})

        assert result == [{"provider": "github"}]
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/v2/users/u1/identities"
        assert recorder.last_json() == {"provider": "github", "user_id": "42"}

    @pytest.mark.asyncio
    async def test_create_with_body_only(self, recorder):
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        await client.create({"email": "a@example.com"})

        assert recorder.last.url.path == "/api/v2/users"
        assert recorder.last_json() == {"email": "a@example.com"}

    @pytest.mark.asyncio
    async def test_patch_update_delete_methods(self, recorder):
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        await client.patch({"id": "u1"}, {"blocked": True})
        await client.update({"id": "u1"}, {"name": "x"})
        await client.delete({"id": "u1"})

        assert [r.method for r in recorder.requests] == ["PATCH", "PUT", "DELETE"]

    @pytest.mark.asyncio
    async def test_empty_response_is_none(self, recorder):
        recorder.respond(204, None)
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        assert await client.delete({"id": "u1"}) is None

    @pytest.mark.asyncio
    async def test_error_response_raises(self, recorder):
        recorder.respond(404, {"statusCode": 404, "error": "Not Found", "message": "The user does not exist."})
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        with pytest.raises(ManagementAPIError) as exc_info:
            await client.get({"id": "missing"})

        assert exc_info.value.status_code == 404
        assert exc_info.value.error == "Not Found"
        assert exc_info.value.message == "The user does not exist."

    @pytest.mark.asyncio
    async def test_network_error_is_wrapped(self, recorder):
        recorder.fail_with(httpx.ConnectError("connection refused"))
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        with pytest.raises(ManagementAPIError) as exc_info:
            await client.get({"id": "u1"})

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_bad_arguments_raise_before_dispatch(self, recorder):
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)

        with pytest.raises(ArgumentError):
            client.get("u1")
        with pytest.raises(ArgumentError):
            client.create()
        with pytest.raises(ArgumentError):
            client.delete({"id": "u1"}, {"extra": True})

        assert recorder.requests == []


class TestCallbacks:
    """Tests for the callback convention."""

    def test_callback_without_event_loop(self, recorder):
        recorder.respond(200, {"user_id": "u1"})
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)
        calls = []

        returned = client.get({"id": "u1"}, lambda err, result: calls.append((err, result)))

        assert returned is None
        assert calls == [(None, {"user_id": "u1"})]

    def test_callback_receives_error(self, recorder):
        recorder.respond(500, {"message": "boom"})
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)
        calls = []

        client.delete({"id": "u1"}, lambda err, result: calls.append((err, result)))

        assert len(calls) == 1
        err, result = calls[0]
        assert isinstance(err, ManagementAPIError)
        assert err.status_code == 500
        assert result is None

    @pytest.mark.asyncio
    async def test_callback_inside_event_loop(self, recorder):
        recorder.respond(200, {"user_id": "u1"})
        client = RestClient(f"{BASE_URL}/users/:id", transport=recorder.transport)
        done = asyncio.get_running_loop().create_future()

        returned = client.get({"id": "u1"}, lambda err, result: done.set_result((err, result)))

        assert returned is None
        assert await asyncio.wait_for(done, timeout=5) == (None, {"user_id": "u1"})
        assert len(recorder.requests) == 1
