import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from classnote.database import Base
from classnote.utils.time_utils import get_seoul_time

class WeeklyMaterial(Base):
    __tablename__ = "weekly_materials"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    week = Column(Integer, index=True, nullable=False)
    start_date = Column(String, nullable=False)
    end_date = Column(String, nullable=False)
    file_path = Column(String, nullable=True)
    content = Column(Text, nullable=True) # Extracted file content
    subjects = Column(JSON, nullable=True) # ["국어", "수학", ...]
    timetable = Column(JSON, nullable=True) # {"월": {"1": {"subject", "unit", "topic"}}}
    uploaded_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=get_seoul_time)

    learning_records = relationship("LearningRecord", back_populates="weekly_material", passive_deletes=True)
