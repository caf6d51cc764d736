import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from classnote.database import Base
from classnote.utils.time_utils import get_seoul_time

class UserRole:
    TEACHER = "teacher"
    STUDENT = "student"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False) # Hashed
    role = Column(String, nullable=False, default=UserRole.STUDENT) # 'teacher' or 'student'
    name = Column(String, nullable=False)
    student_number = Column(String, nullable=True)
    class_room = Column(String, nullable=True)
    created_at = Column(DateTime, default=get_seoul_time)

    student_profile = relationship("Student", back_populates="user", uselist=False)

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER
