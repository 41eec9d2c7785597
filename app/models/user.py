"""User model: message and post authors, keyed by platform id."""

from __future__ import annotations

from sqlalchemy import Column, String

from app.db import Base
from app.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    username = Column(String(256), nullable=False)
    avatar_url = Column(String(1024), nullable=True)
