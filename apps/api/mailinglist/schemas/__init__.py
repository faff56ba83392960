"""Schema module for RPC request/response models."""

from mailinglist.schemas.email import (
    CreateEmailRequest,
    EmailAddrRequest,
    EmailBatchResponse,
    EmailEntryDTO,
    EmailResponse,
    GetEmailBatchRequest,
    UpdateEmailRequest,
)

__all__ = [
    "CreateEmailRequest",
    "EmailAddrRequest",
    "EmailBatchResponse",
    "EmailEntryDTO",
    "EmailResponse",
    "GetEmailBatchRequest",
    "UpdateEmailRequest",
]
