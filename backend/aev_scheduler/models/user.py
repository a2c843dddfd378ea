"""
User model: auth (email + password), role (student | staff).
Email is the login key; deleting a user removes its tasks and project memberships
and leaves its activity entries behind with user_id set to NULL.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from aev_scheduler.database import Base
from aev_scheduler.models.types import UuidType, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UuidType(), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(30), nullable=False, default="student")  # student | staff
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    __table_args__ = (CheckConstraint("role IN ('student', 'staff')", name="users_role_check"),)

    projects = relationship("Project", secondary="project_members", back_populates="users")
    tasks = relationship("Task", back_populates="user", cascade="all, delete")
    activities = relationship("Activity", back_populates="user")
