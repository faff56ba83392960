"""Tests for the mailing list API client."""

import json

import httpx
import pytest

from mailinglist.client import MailingListClient, MailingListClientError, run_demo
from mailinglist.schemas.email import EmailEntryDTO


def make_client(handler) -> MailingListClient:
    """Create a client whose HTTP calls go to `handler`."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    )
    return MailingListClient("http://test", http_client=http_client)


ENTRY = {"id": 1, "email": "a@example.com", "confirmedAt": None, "optOut": False}


class TestMailingListClient:
    """MailingListClient tests."""

    @pytest.mark.asyncio
    async def test_create_email_posts_address(self) -> None:
        """create_email should POST emailAddr and parse the entry."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"emailEntry": ENTRY})

        client = make_client(handler)
        result = await client.create_email("a@example.com")

        assert result == EmailEntryDTO(**ENTRY)
        assert seen[0].url.path == "/api/email/create"
        assert json.loads(seen[0].content) == {"emailAddr": "a@example.com"}

    @pytest.mark.asyncio
    async def test_get_email_returns_none_when_not_found(self) -> None:
        """A null entry should be returned as None, not raised."""
        client = make_client(
            lambda request: httpx.Response(200, json={"emailEntry": None})
        )

        assert await client.get_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_update_email_sends_full_entry(self) -> None:
        """update_email should send every entry field."""
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            seen.append(body)
            return httpx.Response(200, json=body)

        client = make_client(handler)
        entry = EmailEntryDTO(**{**ENTRY, "confirmedAt": 10000})
        result = await client.update_email(entry)

        assert seen[0] == {"emailEntry": {**ENTRY, "confirmedAt": 10000}}
        assert result.confirmedAt == 10000

    @pytest.mark.asyncio
    async def test_get_email_batch_returns_entries(self) -> None:
        """get_email_batch should send count and page and parse the list."""
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"emailEntries": [ENTRY]})

        client = make_client(handler)
        result = await client.get_email_batch(count=5, page=2)

        assert seen[0] == {"count": 5, "page": 2}
        assert [e.email for e in result] == ["a@example.com"]

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        """A non-200 response should raise with the status code."""
        client = make_client(
            lambda request: httpx.Response(
                409, json={"detail": {"error": "duplicate_email"}}
            )
        )

        with pytest.raises(MailingListClientError) as exc_info:
            await client.create_email("a@example.com")

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        """A transport timeout should raise MailingListClientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(MailingListClientError) as exc_info:
            await client.get_email("a@example.com")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_connection_error_raises(self) -> None:
        """A refused connection should raise MailingListClientError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(MailingListClientError):
            await client.get_email_batch(count=1, page=1)


class TestRunDemo:
    """run_demo tests."""

    @pytest.mark.asyncio
    async def test_run_demo_calls_every_endpoint(self) -> None:
        """The demo should create, update, delete and list three pages."""
        calls: list[tuple[str, dict]] = []
        entry = {**ENTRY, "email": "lots_of_mail@mailmen.gov"}

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            calls.append((request.url.path, body))
            if request.url.path.endswith("/batch"):
                return httpx.Response(200, json={"emailEntries": []})
            return httpx.Response(200, json={"emailEntry": entry})

        await run_demo(make_client(handler))

        assert [path for path, _ in calls] == [
            "/api/email/create",
            "/api/email/update",
            "/api/email/delete",
            "/api/email/batch",
            "/api/email/batch",
            "/api/email/batch",
        ]
        assert calls[1][1]["emailEntry"]["confirmedAt"] == 10000
        assert [body for _, body in calls[3:]] == [
            {"count": 5, "page": 1},
            {"count": 3, "page": 2},
            {"count": 3, "page": 3},
        ]

    @pytest.mark.asyncio
    async def test_run_demo_stops_on_failure(self) -> None:
        """The demo should not continue after a failed call."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(500, json={"detail": {"error": "storage_error"}})

        with pytest.raises(MailingListClientError):
            await run_demo(make_client(handler))

        assert calls == ["/api/email/create"]
