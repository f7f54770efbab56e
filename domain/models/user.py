"""
Identity and profile database models.
"""

from sqlalchemy import JSON, Column, Text, TIMESTAMP, ForeignKey, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class AuthUser(Base):
    """Local mirror of an identity-provider account.

    Rows are written only through the trusted signup path; no policy exposes
    them to authenticated callers.
    """

    __tablename__ = "auth_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False)


class Profile(Base):
    """User profile; one per identity, keyed by the identity id"""

    __tablename__ = "profiles"

    id = Column(Uuid, ForeignKey("auth_users.id"), primary_key=True)
    username = Column(Text, unique=True)
    full_name = Column(Text)
    avatar_url = Column(Text)
    dietary_preferences = Column(
        JSON().with_variant(JSONB(), "postgresql"), default=list, server_default="[]"
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AuthUser", back_populates="profile")
