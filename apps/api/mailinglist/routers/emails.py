"""Mailing list RPC endpoints.

Provides endpoints for:
- POST /api/email/create - Register a new address
- POST /api/email/get - Fetch an entry by address
- POST /api/email/update - Upsert confirmation and opt-out state
- POST /api/email/delete - Opt out an address (the row is kept)
- POST /api/email/batch - Page through entries that have not opted out

Every call runs under the configured request deadline. An unknown address
is a normal response with emailEntry set to null, never an error status.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mailinglist.config import get_settings
from mailinglist.database import get_db
from mailinglist.models import EmailEntry
from mailinglist.repositories.email_repository import (
    DuplicateEmailError,
    EmailStorageError,
    InvalidBatchQueryError,
    create_email,
    delete_email,
    get_email,
    get_email_batch,
    update_email,
)
from mailinglist.schemas.email import (
    CreateEmailRequest,
    EmailAddrRequest,
    EmailBatchResponse,
    EmailEntryDTO,
    EmailResponse,
    GetEmailBatchRequest,
    UpdateEmailRequest,
)
from mailinglist.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

T = TypeVar("T")


def entry_to_dto(entry: EmailEntry | None) -> EmailEntryDTO | None:
    """Convert EmailEntry model to EmailEntryDTO.

    Args:
        entry: EmailEntry model instance, or None

    Returns:
        EmailEntryDTO, or None when there is no entry
    """
    if entry is None:
        return None
    return EmailEntryDTO(
        id=entry.id,
        email=entry.email,
        confirmedAt=entry.confirmed_at,
        optOut=entry.opt_out,
    )


async def _rollback(session: AsyncSession) -> None:
    """Roll back after a failed call; a failing rollback is only logged."""
    try:
        await session.rollback()
    except Exception:
        logger.exception("Rollback failed")


async def run_with_deadline(
    session: AsyncSession,
    action: str,
    call: Callable[[], Awaitable[T]],
) -> T:
    """Run one RPC call under the request deadline and map its failures.

    Args:
        session: Database session used by the call
        action: Short name of the call, for logs
        call: Coroutine factory doing the work

    Returns:
        Whatever the call returns

    Raises:
        HTTPException 409: Duplicate address on create
        HTTPException 422: Invalid batch page or count
        HTTPException 500: Database failure
        HTTPException 504: Deadline exceeded
    """
    timeout = get_settings().request_timeout_seconds
    try:
        return await asyncio.wait_for(call(), timeout=timeout)
    except DuplicateEmailError as e:
        await _rollback(session)
        logger.warning(f"{action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "duplicate_email"},
        ) from e
    except InvalidBatchQueryError as e:
        logger.warning(f"{action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "invalid_batch_query"},
        ) from e
    except asyncio.TimeoutError as e:
        await _rollback(session)
        logger.error(f"{action}: deadline of {timeout}s exceeded")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail={"error": "timeout"},
        ) from e
    except (EmailStorageError, SQLAlchemyError) as e:
        await _rollback(session)
        logger.error(f"{action}: storage failure: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "storage_error"},
        ) from e


@router.post("/email/create", response_model=EmailResponse)
async def create_email_endpoint(
    request: CreateEmailRequest,
    session: AsyncSession = Depends(get_db),
) -> EmailResponse:
    """Register a new, unconfirmed address.

    Args:
        request: Address to register
        session: Database session

    Returns:
        EmailResponse with the stored entry

    Raises:
        HTTPException 409: If the address is already registered
    """
    logger.info(f"create email: {request.emailAddr}")

    async def call() -> EmailEntry | None:
        await create_email(session, request.emailAddr)
        await session.commit()
        return await get_email(session, request.emailAddr)

    entry = await run_with_deadline(session, "create email", call)
    return EmailResponse(emailEntry=entry_to_dto(entry))


@router.post("/email/get", response_model=EmailResponse)
async def get_email_endpoint(
    request: EmailAddrRequest,
    session: AsyncSession = Depends(get_db),
) -> EmailResponse:
    """Fetch an entry by address; emailEntry is null if it does not exist."""
    logger.info(f"get email: {request.emailAddr}")

    async def call() -> EmailEntry | None:
        return await get_email(session, request.emailAddr)

    entry = await run_with_deadline(session, "get email", call)
    return EmailResponse(emailEntry=entry_to_dto(entry))


@router.post("/email/update", response_model=EmailResponse)
async def update_email_endpoint(
    request: UpdateEmailRequest,
    session: AsyncSession = Depends(get_db),
) -> EmailResponse:
    """Upsert an entry's confirmation and opt-out state.

    The entry is created when the address is unknown. The id in the
    request is ignored; ids are assigned by the store only.

    Args:
        request: Entry carrying the new state
        session: Database session

    Returns:
        EmailResponse with the entry as stored after the update
    """
    entry_in = request.emailEntry
    logger.info(f"update email: {entry_in.email}")

    async def call() -> EmailEntry | None:
        await update_email(
            session,
            email=entry_in.email,
            confirmed_at=entry_in.confirmedAt,
            opt_out=entry_in.optOut,
        )
        await session.commit()
        return await get_email(session, entry_in.email)

    entry = await run_with_deadline(session, "update email", call)
    return EmailResponse(emailEntry=entry_to_dto(entry))


@router.post("/email/delete", response_model=EmailResponse)
async def delete_email_endpoint(
    request: EmailAddrRequest,
    session: AsyncSession = Depends(get_db),
) -> EmailResponse:
    """Opt out an address.

    The row is kept so the address can never be registered again.
    An unknown address is not an error and yields a null entry.
    """
    logger.info(f"delete email: {request.emailAddr}")

    async def call() -> EmailEntry | None:
        if not await delete_email(session, request.emailAddr):
            logger.info(f"delete email: {request.emailAddr} not registered")
        await session.commit()
        return await get_email(session, request.emailAddr)

    entry = await run_with_deadline(session, "delete email", call)
    return EmailResponse(emailEntry=entry_to_dto(entry))


@router.post("/email/batch", response_model=EmailBatchResponse)
async def get_email_batch_endpoint(
    request: GetEmailBatchRequest,
    session: AsyncSession = Depends(get_db),
) -> EmailBatchResponse:
    """Return one page of entries that have not opted out, ordered by id."""
    logger.info(f"get email batch: count={request.count} page={request.page}")

    async def call() -> list[EmailEntry]:
        return await get_email_batch(session, page=request.page, count=request.count)

    entries = await run_with_deadline(session, "get email batch", call)
    return EmailBatchResponse(emailEntries=[entry_to_dto(e) for e in entries])
