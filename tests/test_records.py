"""
Learning records: ownership substitution, submission round trip, weekly views
"""

import unittest
from datetime import datetime

from app_fixtures import ApiTestCase


class TestRecordOwnership(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()
        self.bulk_create([
            ("김민수", "2025001", "minsu", "pw-a"),
            ("이서연", "2025002", "seoyeon", "pw-b"),
        ])
        self.minsu_id = self.student_id_for("2025001")
        self.seoyeon_id = self.student_id_for("2025002")

    def test_student_write_goes_to_own_profile(self):
        """A foreign studentId from a student is ignored"""
        self.login("minsu", "pw-a")
        record = self.create_record(studentId=self.seoyeon_id, content="내 기록")
        self.assertEqual(record["studentId"], self.minsu_id)

        self.login_teacher()
        theirs = self.client.get(f"/api/learning-records?studentId={self.seoyeon_id}").json()
        self.assertEqual(theirs, [])

    def test_student_read_is_own_only(self):
        self.create_record(studentId=self.seoyeon_id, content="서연 기록")
        self.create_record(studentId=self.minsu_id, content="민수 기록")

        self.login("minsu", "pw-a")
        records = self.client.get(f"/api/learning-records?studentId={self.seoyeon_id}").json()
        self.assertEqual([r["content"] for r in records], ["민수 기록"])

        weekly = self.client.get(f"/api/learning-records/weekly?week=1&studentId={self.seoyeon_id}").json()
        self.assertEqual([r["content"] for r in weekly], ["민수 기록"])

    def test_student_cannot_touch_other_record(self):
        other = self.create_record(studentId=self.seoyeon_id, content="서연 기록")

        self.login("minsu", "pw-a")
        self.assertEqual(self.client.get(f"/api/learning-records/{other['id']}").status_code, 404)
        res = self.client.put(f"/api/learning-records/{other['id']}", json={"content": "덮어쓰기"})
        self.assertEqual(res.status_code, 404)

        self.login_teacher()
        kept = self.client.get(f"/api/learning-records/{other['id']}").json()
        self.assertEqual(kept["content"], "서연 기록")

    def test_teacher_lists_everything_without_student(self):
        self.create_record(studentId=self.seoyeon_id)
        self.create_record(studentId=self.minsu_id)
        self.assertEqual(len(self.client.get("/api/learning-records").json()), 2)

    def test_student_without_profile_is_404(self):
        self.logout()
        self.register(username="loner", password="pw", name="프로필 없음", role="student")
        self.assertEqual(self.client.get("/api/learning-records").status_code, 404)
        res = self.client.post("/api/learning-records", json={"subject": "국어", "content": "x", "week": 1})
        self.assertEqual(res.status_code, 404)

    def test_teacher_create_requires_student(self):
        res = self.client.post("/api/learning-records", json={"subject": "국어", "content": "x", "week": 1})
        self.assertEqual(res.status_code, 400)
        res = self.client.post("/api/learning-records", json={
            "studentId": "missing", "subject": "국어", "content": "x", "week": 1,
        })
        self.assertEqual(res.status_code, 404)

    def test_missing_required_fields_is_400(self):
        self.login("minsu", "pw-a")
        self.assertEqual(self.client.post("/api/learning-records", json={"subject": "국어", "week": 1}).status_code, 400)
        res = self.client.post("/api/learning-records", json={"subject": "국어", "content": "", "week": 1})
        self.assertEqual(res.status_code, 400)
        res = self.client.post("/api/learning-records", json={"subject": "국어", "content": "x"})
        self.assertEqual(res.status_code, 400)


class TestRecordLifecycle(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()
        self.bulk_create([("김민수", "2025001", "minsu", "pw-a")])
        self.login("minsu", "pw-a")

    def test_draft_then_submit(self):
        draft = self.create_record(isSubmitted=False, reflection="어려웠다")
        self.assertFalse(draft["isSubmitted"])
        self.assertIsNone(draft["submittedAt"])

        res = self.client.put(f"/api/learning-records/{draft['id']}", json={
            "isSubmitted": True,
            "submittedAt": "2025-03-14T09:30:00",
            "content": "분수의 덧셈과 뺄셈을 배웠다.",
        })
        self.assertEqual(res.status_code, 200)

        fetched = self.client.get("/api/learning-records").json()[0]
        self.assertTrue(fetched["isSubmitted"])
        self.assertEqual(fetched["submittedAt"], "2025-03-14T09:30:00")
        self.assertEqual(fetched["content"], "분수의 덧셈과 뺄셈을 배웠다.")
        self.assertEqual(fetched["reflection"], "어려웠다")
        self.assertGreater(datetime.fromisoformat(fetched["updatedAt"]), datetime.fromisoformat(fetched["createdAt"]))

    def test_submit_without_timestamp_stamps_now(self):
        draft = self.create_record(isSubmitted=False)
        updated = self.client.put(f"/api/learning-records/{draft['id']}", json={"isSubmitted": True}).json()
        self.assertIsNotNone(updated["submittedAt"])

    def test_post_defaults_to_submitted(self):
        record = self.create_record()
        self.assertTrue(record["isSubmitted"])
        self.assertIsNotNone(record["submittedAt"])

    def test_update_unknown_is_404(self):
        self.assertEqual(self.client.put("/api/learning-records/nope", json={"content": "x"}).status_code, 404)


class TestWeeklyViews(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()
        self.bulk_create([
            ("김민수", "2025001", "minsu", "pw-a"),
            ("이서연", "2025002", "seoyeon", "pw-b"),
        ])
        self.minsu_id = self.student_id_for("2025001")
        self.seoyeon_id = self.student_id_for("2025002")
        self.create_record(studentId=self.minsu_id, week=2, dayOfWeek="월", subject="국어")
        self.create_record(studentId=self.minsu_id, week=2, dayOfWeek="화", subject="수학")
        self.create_record(studentId=self.seoyeon_id, week=2, dayOfWeek="월", subject="과학")
        self.create_record(studentId=self.seoyeon_id, week=3, dayOfWeek="월", subject="사회")

    def test_weekly_requires_week(self):
        self.assertEqual(self.client.get("/api/learning-records/weekly").status_code, 400)

    def test_weekly_filters(self):
        week = self.client.get("/api/learning-records/weekly?week=2").json()
        self.assertEqual(len(week), 3)

        monday = self.client.get("/api/learning-records/weekly?week=2&dayOfWeek=월").json()
        self.assertEqual(sorted(r["subject"] for r in monday), ["과학", "국어"])

        one = self.client.get(f"/api/learning-records/weekly?week=2&dayOfWeek=화&studentId={self.minsu_id}").json()
        self.assertEqual([r["subject"] for r in one], ["수학"])

        self.assertEqual(self.client.get("/api/learning-records/weekly?week=9").json(), [])

    def test_daily_summary_embeds_student(self):
        summary = self.client.get("/api/learning-records/daily-summary?week=2&dayOfWeek=월").json()
        self.assertEqual(len(summary), 2)
        by_subject = {r["subject"]: r for r in summary}
        self.assertEqual(by_subject["국어"]["student"]["name"], "김민수")
        self.assertEqual(by_subject["과학"]["student"]["studentNumber"], "2025002")

        self.assertEqual(self.client.get("/api/learning-records/daily-summary").status_code, 400)

    def test_daily_summary_is_teacher_only(self):
        self.login("minsu", "pw-a")
        self.assertEqual(self.client.get("/api/learning-records/daily-summary?week=2").status_code, 403)


if __name__ == "__main__":
    unittest.main()
