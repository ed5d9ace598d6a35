"""Session rows removed by the Postgres deletion worker."""

from typing import List

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sessionpurge.models._base import Base, TimestampMixin


class Session(TimestampMixin, Base):
    """A recorded user session."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    secure_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    fields: Mapped[List["SessionField"]] = relationship(
        "SessionField", back_populates="session", lazy="noload"
    )


class SessionField(Base):
    """A session-scoped attribute. Must be deleted before its session."""

    __tablename__ = "session_fields"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    session_id: Mapped[int] = mapped_column(
        ForeignKey("sessions.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(String, nullable=False)

    session: Mapped["Session"] = relationship(
        "Session", back_populates="fields", lazy="noload"
    )
