"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from studygate.adapters.persistence.database import Base
from studygate.domain.entities.participant import MAX_PARTICIPANT_ID_LENGTH


class ParticipantModel(Base):
    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(MAX_PARTICIPANT_ID_LENGTH), primary_key=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")
    direction: Mapped[str] = mapped_column(String(10), nullable=False)
    group_name: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_participants_group_status", "group_name", "status"),)


class GroupCountModel(Base):
    __tablename__ = "group_counts"

    group_name: Mapped[str] = mapped_column(String(50), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (CheckConstraint("count >= 0", name="ck_group_counts_non_negative"),)
