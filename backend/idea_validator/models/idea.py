import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator, CHAR

from ..database import Base


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses CHAR(36) to store UUIDs as strings, compatible with all backends
    including SQLite.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid.UUID(value)
        return value


class BusinessIdea(Base):
    """The idea text and tool selection a saved report was produced from."""

    __tablename__ = "business_ideas"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    # Subject claim from the auth provider's token; not a local foreign key
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    selected_tools = Column(Text, nullable=False, default="[]")  # JSON list of tool ids
    created_at = Column(DateTime, default=datetime.utcnow)

    reports = relationship("ValidationReport", back_populates="business_idea")
