"""Repository layer for database operations."""

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

__all__ = [
    "DuplicateEmailError",
    "EmailStorageError",
    "InvalidBatchQueryError",
    "create_email",
    "delete_email",
    "get_email",
    "get_email_batch",
    "update_email",
]
