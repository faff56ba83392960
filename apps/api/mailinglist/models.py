"""SQLAlchemy ORM models for the mailing list."""

from sqlalchemy import BigInteger, Boolean, Integer, Text, false
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class EmailEntry(Base):
    """One mailing list entry per unique email address.

    Rows are never removed: opting out sets ``opt_out`` so the address
    stays registered and cannot be added again.
    """

    __tablename__ = "emails"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # Unix epoch seconds; None until the address is confirmed
    confirmed_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    opt_out: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    def __repr__(self) -> str:
        return (
            f"EmailEntry(id={self.id!r}, email={self.email!r}, "
            f"confirmed_at={self.confirmed_at!r}, opt_out={self.opt_out!r})"
        )
