"""
User-related database models.
"""

from sqlalchemy import Column, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, UTCDateTime


class User(Base):
    """Registered account bound to a session token"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    session_id = Column(Text, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(
        UTCDateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    meals = relationship(
        "Meal",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
