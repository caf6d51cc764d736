import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from classnote.database import Base
from classnote.utils.time_utils import get_seoul_time

class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=True) # Login account, if any
    name = Column(String, nullable=False)
    student_number = Column(String, unique=True, index=True, nullable=False)
    class_room = Column(String, nullable=False)
    # Students are never removed physically, records keep pointing at them
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=get_seoul_time)

    user = relationship("User", back_populates="student_profile")
    learning_records = relationship("LearningRecord", back_populates="student")
    evaluations = relationship("Evaluation", back_populates="student")
