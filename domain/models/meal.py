"""
Meal ledger models.
"""

from sqlalchemy import Column, Text, ForeignKey, Boolean, Uuid, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, UTCDateTime


class Meal(Base):
    """A meal eaten by a user, flagged as on or off the diet"""

    __tablename__ = "meals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    date_time = Column(UTCDateTime, nullable=False)
    is_diet = Column(Boolean, nullable=False)
    created_at = Column(
        UTCDateTime, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        UTCDateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="meals")

    __table_args__ = (Index("ix_meals_user_date_time", "user_id", "date_time"),)
