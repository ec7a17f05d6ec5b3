"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.models.assessment import Assessment


class User(Base, TimestampMixin):
    """Identity created on first Lark login."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    lark_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # Unique only when present (NULLs never collide)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    avatar_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    # Provider token from the last login; never serialized
    lark_access_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    assessments: Mapped[list["Assessment"]] = relationship(
        "Assessment",
        back_populates="assessed_by",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, lark_id={self.lark_id})>"
