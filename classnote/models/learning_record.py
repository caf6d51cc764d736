import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from classnote.database import Base
from classnote.utils.time_utils import get_seoul_time

class LearningRecord(Base):
    __tablename__ = "learning_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id"), index=True, nullable=False)
    weekly_material_id = Column(String(36), ForeignKey("weekly_materials.id", ondelete="SET NULL"), nullable=True)

    subject = Column(String, nullable=False) # 국어, 수학, 과학, 사회, ...
    content = Column(Text, nullable=False) # What the student learned
    reflection = Column(Text, nullable=True) # Feelings / difficulties
    week = Column(Integer, index=True, nullable=False)
    day_of_week = Column(String, nullable=True) # 월, 화, 수, ...

    # draft -> submitted, not enforced here
    is_submitted = Column(Boolean, default=False)
    submitted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=get_seoul_time)
    updated_at = Column(DateTime, default=get_seoul_time, onupdate=get_seoul_time)

    student = relationship("Student", back_populates="learning_records")
    weekly_material = relationship("WeeklyMaterial", back_populates="learning_records")
