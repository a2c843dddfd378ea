"""
Project: many-to-many with User through project_members (staff owner + assigned students).
Status is one of pending | in_progress | completed; transitions are free-form.
"""
import uuid
from datetime import date, datetime
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Table, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from aev_scheduler.database import Base
from aev_scheduler.models.types import UuidType, utcnow

project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", UuidType(), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", UuidType(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending", index=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'in_progress', 'completed')", name="projects_status_check"),
    )

    users = relationship("User", secondary=project_members, back_populates="projects", order_by="User.name")
    tasks = relationship("Task", back_populates="project", cascade="all, delete", order_by="Task.created_at")
    activities = relationship("Activity", back_populates="project")
