import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from .idea import GUID


class ValidationReport(Base):
    """One saved validation run, owned by the token subject that saved it."""

    __tablename__ = "validation_reports"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    business_idea_id = Column(GUID(), ForeignKey("business_ideas.id"), nullable=False)
    report_data = Column(Text, nullable=False)  # JSON list of ToolResult dicts
    average_score = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    business_idea = relationship("BusinessIdea", back_populates="reports", lazy="joined")
