"""Mailing List API client.

Async HTTP client for the five mailing list calls. Each call has a
one-second timeout by default. There is no retry policy, so any failure
is logged and raised as MailingListClientError.
"""

import asyncio
from typing import Any, Optional

import httpx

from mailinglist.config import get_settings
from mailinglist.schemas.email import EmailEntryDTO
from mailinglist.utils.addr import base_url_from_addr
from mailinglist.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 1.0


class MailingListClientError(Exception):
    """Exception raised when a mailing list call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MailingListClient:
    """Client for the mailing list RPC endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Service base URL, e.g. "http://127.0.0.1:8081"
            timeout: Per-call timeout in seconds
            http_client: Pre-built httpx client (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=self.base_url)

    async def __aenter__(self) -> "MailingListClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, path: str, payload: dict) -> dict:
        """POST one RPC request and return the decoded JSON body.

        Raises:
            MailingListClientError: On transport failure, timeout or error status
        """
        try:
            response = await self._client.post(
                f"/api/email/{path}", json=payload, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.error(f"  error: {path} timed out after {self.timeout}s")
            raise MailingListClientError(f"{path} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"  error: {path} failed: {e}")
            raise MailingListClientError(f"{path} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"  error: {path}: {response.status_code} - {response.text}")
            raise MailingListClientError(
                f"{path} failed: {response.text}",
                status_code=response.status_code,
            )

        return response.json()

    def _entry_from_response(self, data: dict) -> EmailEntryDTO | None:
        raw = data.get("emailEntry")
        if raw is None:
            logger.info("  email not found")
            return None
        entry = EmailEntryDTO.model_validate(raw)
        logger.info(f"  response: {entry}")
        return entry

    async def create_email(self, addr: str) -> EmailEntryDTO | None:
        """Register a new address."""
        logger.info("create email")
        data = await self._call("create", {"emailAddr": addr})
        return self._entry_from_response(data)

    async def get_email(self, addr: str) -> EmailEntryDTO | None:
        """Fetch an entry by address; None if not registered."""
        logger.info("get email")
        data = await self._call("get", {"emailAddr": addr})
        return self._entry_from_response(data)

    async def update_email(self, entry: EmailEntryDTO) -> EmailEntryDTO | None:
        """Upsert an entry's confirmation and opt-out state."""
        logger.info("update email")
        data = await self._call("update", {"emailEntry": entry.model_dump()})
        return self._entry_from_response(data)

    async def delete_email(self, addr: str) -> EmailEntryDTO | None:
        """Opt out an address."""
        logger.info("delete email")
        data = await self._call("delete", {"emailAddr": addr})
        return self._entry_from_response(data)

    async def get_email_batch(self, count: int, page: int) -> list[EmailEntryDTO]:
        """Fetch one page of entries that have not opted out.

        Args:
            count: Page size
            page: 1-indexed page number

        Returns:
            Entries in ascending id order, possibly empty
        """
        logger.info("get email batch")
        data = await self._call("batch", {"count": count, "page": page})
        entries = [
            EmailEntryDTO.model_validate(raw) for raw in data.get("emailEntries", [])
        ]
        logger.info("response:")
        for i, entry in enumerate(entries, start=1):
            logger.info(f"  item [{i} of {len(entries)}]: {entry}")
        return entries


async def run_demo(client: MailingListClient) -> None:
    """Exercise every call once against a running service.

    Registers an address, confirms it, opts it out and then lists a few
    pages of entries.
    """
    new_email = await client.create_email("lots_of_mail@mailmen.gov")
    if new_email is None:
        raise MailingListClientError("create email returned no entry")

    new_email.confirmedAt = 10000
    await client.update_email(new_email)
    await client.delete_email(new_email.email)

    await client.get_email_batch(count=5, page=1)
    await client.get_email_batch(count=3, page=2)
    await client.get_email_batch(count=3, page=3)


def main() -> None:
    """Run the demo against the service at MAILINGLIST_API_ADDR."""
    settings = get_settings()
    configure_logging(debug=settings.debug)

    async def _run() -> None:
        async with MailingListClient(base_url_from_addr(settings.api_addr)) as client:
            await run_demo(client)

    asyncio.run(_run())
