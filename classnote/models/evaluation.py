import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from classnote.database import Base
from classnote.utils.time_utils import get_seoul_time

class GeneratedBy:
    AI = "ai"
    MANUAL = "manual"

class Evaluation(Base):
    __tablename__ = "evaluations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id"), index=True, nullable=False)
    subject = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    generated_by = Column(String, default=GeneratedBy.AI) # 'ai' or 'manual'

    # Week range covered
    period_start = Column(Integer, nullable=False)
    period_end = Column(Integer, nullable=False)

    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=get_seoul_time)
    updated_at = Column(DateTime, default=get_seoul_time, onupdate=get_seoul_time)

    student = relationship("Student", back_populates="evaluations")
