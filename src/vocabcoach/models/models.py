"""Database models for the vocabulary coach."""
from sqlalchemy import Column, String, Text

from vocabcoach.models.base import Base, TimestampMixin


class StateEntry(Base, TimestampMixin):
    """A named JSON document holding one piece of persisted engine state."""

    __tablename__ = "state_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)  # JSON encoded
