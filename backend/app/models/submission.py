import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.user import _utc_now


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    problem_id = Column(String, nullable=False, index=True)
    language = Column(String, nullable=False)  # cpp, java, javascript, python
    code = Column(Text, nullable=False)
    # Judging is handled elsewhere; records are created as "pending"
    status = Column(String, default="pending", nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    # Relationships
    user = relationship("User", back_populates="submissions")
