"""Email entry repository for database operations.

Provides functions to:
- Create an entry (fails on duplicate address)
- Get an entry by address
- Upsert confirmation and opt-out state
- Opt out an entry (logical delete)
- Page through entries that have not opted out

Functions flush but never commit; the caller owns the transaction.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mailinglist.models import EmailEntry
from mailinglist.utils.logging import get_logger

logger = get_logger(__name__)


class DuplicateEmailError(Exception):
    """Exception raised when creating an entry for an existing address."""

    pass


class EmailStorageError(Exception):
    """Exception raised when the database fails for any other reason."""

    pass


class InvalidBatchQueryError(ValueError):
    """Exception raised for a page below 1 or a negative count."""

    pass


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Re-raise unexpected SQLAlchemy errors as EmailStorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(f"Database error during {action}: {e}")
        raise EmailStorageError(f"Failed to {action}") from e


def _upsert_insert(session: AsyncSession):
    """Return the dialect-specific insert() that supports ON CONFLICT."""
    dialect_name = session.get_bind().dialect.name
    if dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        raise EmailStorageError(f"Upsert is not supported on {dialect_name}")
    return insert


async def create_email(session: AsyncSession, email: str) -> EmailEntry:
    """Create a new, unconfirmed entry.

    Args:
        session: Database session
        email: The email address

    Returns:
        Created EmailEntry instance (id assigned)

    Raises:
        DuplicateEmailError: If the address is already registered
        EmailStorageError: On any other database failure
    """
    entry = EmailEntry(email=email, confirmed_at=None, opt_out=False)
    session.add(entry)

    with _storage_errors("create email"):
        try:
            await session.flush()
        except IntegrityError as e:
            raise DuplicateEmailError(
                f"Email {email} is already registered"
            ) from e

    logger.info(f"Created email entry {entry.id} for {email}")
    return entry


async def get_email(session: AsyncSession, email: str) -> EmailEntry | None:
    """Get entry by address.

    Args:
        session: Database session
        email: The email address

    Returns:
        EmailEntry if found, None otherwise
    """
    query = (
        select(EmailEntry)
        .where(EmailEntry.email == email)
        .execution_options(populate_existing=True)
    )
    with _storage_errors("get email"):
        result = await session.execute(query)
        return result.scalar_one_or_none()


async def update_email(
    session: AsyncSession,
    email: str,
    confirmed_at: int | None,
    opt_out: bool,
) -> None:
    """Insert the entry, or overwrite its state if the address exists.

    The id of an existing row is never changed.

    Args:
        session: Database session
        email: The email address (upsert key)
        confirmed_at: Confirmation time in epoch seconds, or None
        opt_out: Opt-out flag
    """
    insert = _upsert_insert(session)
    stmt = insert(EmailEntry).values(
        email=email, confirmed_at=confirmed_at, opt_out=opt_out
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={
            "confirmed_at": stmt.excluded.confirmed_at,
            "opt_out": stmt.excluded.opt_out,
        },
    )
    with _storage_errors("update email"):
        await session.execute(stmt)


async def delete_email(session: AsyncSession, email: str) -> bool:
    """Opt out an entry instead of deleting it.

    Keeping the row guarantees the address cannot be registered again.

    Args:
        session: Database session
        email: The email address

    Returns:
        True if a row was opted out, False if the address is unknown
    """
    stmt = update(EmailEntry).where(EmailEntry.email == email).values(opt_out=True)
    with _storage_errors("delete email"):
        result = await session.execute(stmt)
    return result.rowcount > 0


async def get_email_batch(
    session: AsyncSession,
    page: int,
    count: int,
) -> list[EmailEntry]:
    """Get one page of entries that have not opted out, ordered by id.

    Args:
        session: Database session
        page: 1-indexed page number
        count: Page size

    Returns:
        Up to `count` EmailEntry instances, possibly empty

    Raises:
        InvalidBatchQueryError: If page is below 1 or count is negative
    """
    if page < 1:
        raise InvalidBatchQueryError(f"page must be >= 1, got {page}")
    if count < 0:
        raise InvalidBatchQueryError(f"count must be >= 0, got {count}")

    query = (
        select(EmailEntry)
        .where(EmailEntry.opt_out.is_(False))
        .order_by(EmailEntry.id.asc())
        .limit(count)
        .offset((page - 1) * count)
    )
    with _storage_errors("get email batch"):
        result = await session.execute(query)
        return list(result.scalars().all())
