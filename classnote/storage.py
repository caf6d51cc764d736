"""
Entity store: every read and write the request handlers perform goes
through one Storage instance bound to the request's AsyncSession.

List queries return an empty list when nothing matches; single-row
lookups return None.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from classnote.errors import ConflictError
from classnote.models.user import User, UserRole
from classnote.models.student import Student
from classnote.models.weekly_material import WeeklyMaterial
from classnote.models.learning_record import LearningRecord
from classnote.models.evaluation import Evaluation
from classnote.services.file_storage import remove_file
from classnote.utils.time_utils import get_seoul_time

logger = logging.getLogger(__name__)


@dataclass
class BulkRowResult:
    row: int
    username: str
    success: bool
    user: Optional[User] = None
    error: Optional[str] = None


class Storage:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, conflict_message: str):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"Unique constraint violated: {e.orig}")
            raise ConflictError(conflict_message) from e

    async def _first(self, stmt):
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def _all(self, stmt) -> list:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # --- USERS ---

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.id == user_id))

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def create_user(self, username: str, password: str, name: str, role: str = UserRole.STUDENT,
                          student_number: str = None, class_room: str = None) -> User:
        """
        Creates a login account. A student account that carries a student
        number also gets its Student profile in the same commit.
        """
        user = User(
            username=username,
            password=password,
            name=name,
            role=role,
            student_number=student_number,
            class_room=class_room,
        )
        self.db.add(user)
        if role == UserRole.STUDENT and student_number:
            await self.db.flush()
            self.db.add(Student(
                user_id=user.id,
                name=name,
                student_number=student_number,
                class_room=class_room,
            ))
        await self._commit("이미 사용 중인 아이디 또는 학번입니다.")
        await self.db.refresh(user)
        return user

    async def update_user_password(self, user_id: str, password: str) -> Optional[User]:
        user = await self.get_user(user_id)
        if not user:
            return None
        user.password = password
        await self.db.commit()
        await self.db.refresh(user)
        return user

    # --- STUDENTS ---

    async def get_all_students(self) -> List[Student]:
        stmt = select(Student).where(Student.is_active == True).order_by(Student.student_number.asc())
        return await self._all(stmt)

    async def get_student(self, student_id: str) -> Optional[Student]:
        return await self._first(select(Student).where(Student.id == student_id))

    async def get_student_by_user_id(self, user_id: str) -> Optional[Student]:
        return await self._first(select(Student).where(Student.user_id == user_id))

    async def create_student(self, name: str, student_number: str, class_room: str,
                             user_id: str = None) -> Student:
        student = Student(name=name, student_number=student_number, class_room=class_room, user_id=user_id)
        self.db.add(student)
        await self._commit("이미 등록된 학번입니다.")
        await self.db.refresh(student)
        return student

    async def update_student(self, student_id: str, changes: dict) -> Optional[Student]:
        student = await self.get_student(student_id)
        if not student:
            return None
        for key, value in changes.items():
            setattr(student, key, value)
        await self._commit("이미 등록된 학번입니다.")
        await self.db.refresh(student)
        return student

    async def delete_student(self, student_id: str):
        # Soft delete only
        student = await self.get_student(student_id)
        if student:
            student.is_active = False
            await self.db.commit()

    async def create_bulk_students(self, rows: List[dict], class_room: str) -> List[BulkRowResult]:
        """
        Creates a User and its linked Student for every row. Each row is
        committed on its own: a failing row is rolled back and reported,
        the rows around it are unaffected.

        Rows carry name, student_number, username and an already hashed password.
        """
        results = []
        for index, row in enumerate(rows):
            try:
                user = User(
                    username=row["username"],
                    password=row["password"],
                    name=row["name"],
                    role=UserRole.STUDENT,
                    student_number=row["student_number"],
                    class_room=class_room,
                )
                self.db.add(user)
                await self.db.flush()
                self.db.add(Student(
                    user_id=user.id,
                    name=row["name"],
                    student_number=row["student_number"],
                    class_room=class_room,
                ))
                await self.db.commit()
                await self.db.refresh(user)
                # Detach so a later rollback does not expire this row
                self.db.expunge(user)
                results.append(BulkRowResult(row=index, username=row["username"], success=True, user=user))
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(f"Bulk student row {index} ({row['username']}) failed: {e.orig}")
                results.append(BulkRowResult(
                    row=index,
                    username=row["username"],
                    success=False,
                    error="이미 사용 중인 아이디 또는 학번입니다.",
                ))
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Bulk student row {index} ({row['username']}) failed: {e}", exc_info=True)
                results.append(BulkRowResult(
                    row=index,
                    username=row["username"],
                    success=False,
                    error="학생 계정을 저장하지 못했습니다.",
                ))
        return results

    # --- WEEKLY MATERIALS ---

    async def get_all_weekly_materials(self) -> List[WeeklyMaterial]:
        return await self._all(select(WeeklyMaterial).order_by(WeeklyMaterial.week.desc()))

    async def get_weekly_material(self, material_id: str) -> Optional[WeeklyMaterial]:
        return await self._first(select(WeeklyMaterial).where(WeeklyMaterial.id == material_id))

    async def get_weekly_material_by_week(self, week: int) -> Optional[WeeklyMaterial]:
        stmt = (
            select(WeeklyMaterial)
            .where(WeeklyMaterial.week == week)
            .order_by(WeeklyMaterial.created_at.desc())
        )
        return await self._first(stmt)

    async def create_weekly_material(self, **fields) -> WeeklyMaterial:
        material = WeeklyMaterial(**fields)
        self.db.add(material)
        await self.db.commit()
        await self.db.refresh(material)
        return material

    async def delete_weekly_material(self, material: WeeklyMaterial):
        # File first, then the row
        if material.file_path:
            remove_file(material.file_path)
        await self.db.delete(material)
        await self.db.commit()

    # --- LEARNING RECORDS ---

    async def get_all_learning_records(self) -> List[LearningRecord]:
        stmt = select(LearningRecord).order_by(LearningRecord.week.desc(), LearningRecord.created_at.desc())
        return await self._all(stmt)

    async def get_learning_records_by_student(self, student_id: str) -> List[LearningRecord]:
        stmt = (
            select(LearningRecord)
            .where(LearningRecord.student_id == student_id)
            .order_by(LearningRecord.week.desc())
        )
        return await self._all(stmt)

    async def get_learning_records_by_week(self, week: int) -> List[LearningRecord]:
        return await self._all(select(LearningRecord).where(LearningRecord.week == week))

    async def get_learning_records_by_week_and_day(self, week: int, day_of_week: str) -> List[LearningRecord]:
        stmt = select(LearningRecord).where(
            LearningRecord.week == week,
            LearningRecord.day_of_week == day_of_week,
        )
        return await self._all(stmt)

    async def get_learning_records_by_student_week_and_day(self, student_id: str, week: int,
                                                          day_of_week: str = None) -> List[LearningRecord]:
        stmt = select(LearningRecord).where(
            LearningRecord.student_id == student_id,
            LearningRecord.week == week,
        )
        if day_of_week:
            stmt = stmt.where(LearningRecord.day_of_week == day_of_week)
        return await self._all(stmt)

    async def get_learning_records_by_student_and_subject(self, student_id: str, subject: str) -> List[LearningRecord]:
        stmt = (
            select(LearningRecord)
            .where(LearningRecord.student_id == student_id, LearningRecord.subject == subject)
            .order_by(LearningRecord.week.asc())
        )
        return await self._all(stmt)

    async def get_learning_record(self, record_id: str) -> Optional[LearningRecord]:
        return await self._first(select(LearningRecord).where(LearningRecord.id == record_id))

    async def create_learning_record(self, **fields) -> LearningRecord:
        record = LearningRecord(**fields)
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def update_learning_record(self, record_id: str, changes: dict) -> Optional[LearningRecord]:
        record = await self.get_learning_record(record_id)
        if not record:
            return None
        for key, value in changes.items():
            setattr(record, key, value)
        record.updated_at = get_seoul_time()
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def count_students_with_records_in_week(self, week: int) -> int:
        stmt = select(func.count(func.distinct(LearningRecord.student_id))).where(LearningRecord.week == week)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    # --- EVALUATIONS ---

    async def get_evaluations_by_student(self, student_id: str) -> List[Evaluation]:
        stmt = (
            select(Evaluation)
            .where(Evaluation.student_id == student_id)
            .order_by(Evaluation.created_at.desc())
        )
        return await self._all(stmt)

    async def get_evaluation(self, evaluation_id: str) -> Optional[Evaluation]:
        return await self._first(select(Evaluation).where(Evaluation.id == evaluation_id))

    async def create_evaluation(self, **fields) -> Evaluation:
        evaluation = Evaluation(**fields)
        self.db.add(evaluation)
        await self.db.commit()
        await self.db.refresh(evaluation)
        return evaluation

    async def update_evaluation(self, evaluation_id: str, changes: dict) -> Optional[Evaluation]:
        evaluation = await self.get_evaluation(evaluation_id)
        if not evaluation:
            return None
        for key, value in changes.items():
            setattr(evaluation, key, value)
        evaluation.updated_at = get_seoul_time()
        await self.db.commit()
        await self.db.refresh(evaluation)
        return evaluation

    async def delete_evaluation(self, evaluation_id: str):
        evaluation = await self.get_evaluation(evaluation_id)
        if evaluation:
            await self.db.delete(evaluation)
            await self.db.commit()

    async def count_evaluations(self) -> int:
        result = await self.db.execute(select(func.count(Evaluation.id)))
        return result.scalar() or 0
