"""Email entry schemas for RPC requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_address(v: str) -> str:
    """Require a local part and a domain around a single '@'."""
    local, sep, domain = v.rpartition("@")
    if not sep or not local or not domain:
        raise ValueError("Invalid email format")
    return v


class EmailEntryDTO(BaseModel):
    """Email entry as sent over the wire.

    confirmedAt is Unix epoch seconds, or None while unconfirmed.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    email: str
    confirmedAt: int | None = None
    optOut: bool = False


class CreateEmailRequest(BaseModel):
    """Request body for the create call."""

    emailAddr: str

    @field_validator("emailAddr")
    @classmethod
    def validate_email_addr(cls, v: str) -> str:
        """Validate email format."""
        return _validate_address(v)


class EmailAddrRequest(BaseModel):
    """Request body for the get and delete calls.

    The address is a lookup key only and is used exactly as given.
    """

    emailAddr: str


class UpdateEmailRequest(BaseModel):
    """Request body for the update call, which may insert a new entry."""

    emailEntry: EmailEntryDTO

    @field_validator("emailEntry")
    @classmethod
    def validate_entry_email(cls, v: EmailEntryDTO) -> EmailEntryDTO:
        """Validate email format."""
        _validate_address(v.email)
        return v


class GetEmailBatchRequest(BaseModel):
    """Request body for the batch call. page is 1-indexed; count 0 is an empty page."""

    count: int = Field(ge=0)
    page: int = Field(ge=1)


class EmailResponse(BaseModel):
    """Single entry response; emailEntry is None when no row matches."""

    emailEntry: EmailEntryDTO | None = None


class EmailBatchResponse(BaseModel):
    """Batch response with entries in ascending id order."""

    emailEntries: list[EmailEntryDTO]
