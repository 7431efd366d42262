from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from eventia.platform.database.orm_db_setting import Base


class AttendanceModel(Base):
    __tablename__ = 'attendances'
    __table_args__ = (
        UniqueConstraint('event_id', 'participant_id', name='uq_attendances_event_participant'),
        CheckConstraint(
            "status IN ('registered', 'confirmed', 'cancelled', 'attended')",
            name='ck_attendances_status',
        ),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    event_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True
    )
    participant_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey('participants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), default='registered', nullable=False, index=True
    )
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
