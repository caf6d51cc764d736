"""
Roster management: access rules, soft delete, bulk provisioning, password reset
"""

import asyncio
import unittest
from unittest import mock

from classnote.security import hash_password
from app_fixtures import ApiTestCase


class TestStudentAccess(ApiTestCase):

    def test_unauthenticated_is_401(self):
        """No session at all"""
        for method, path in [
            ("get", "/api/students"),
            ("get", "/api/weekly-materials"),
            ("get", "/api/learning-records"),
            ("get", "/api/evaluations?studentId=x"),
            ("get", "/api/dashboard/stats"),
            ("get", "/api/user"),
        ]:
            res = getattr(self.client, method)(path)
            self.assertEqual(res.status_code, 401, path)

    def test_student_on_teacher_route_is_403(self):
        self.register(username="s1", password="pw", name="학생", role="student", studentNumber="2025001")
        self.assertEqual(self.client.get("/api/students").status_code, 403)
        self.assertEqual(self.client.post("/api/students", json={"name": "x", "studentNumber": "1"}).status_code, 403)
        self.assertEqual(self.client.get("/api/dashboard/stats").status_code, 403)

    def test_login_logout(self):
        self.register_teacher()
        self.logout()
        self.assertEqual(self.client.get("/api/user").status_code, 401)

        bad = self.client.post("/api/login", json={"username": "teacher01", "password": "wrong"})
        self.assertEqual(bad.status_code, 401)

        user = self.login_teacher()
        self.assertEqual(user["role"], "teacher")
        self.assertNotIn("password", user)
        self.assertEqual(self.client.get("/api/user").json()["username"], "teacher01")

    def test_duplicate_username_is_conflict(self):
        self.register_teacher()
        res = self.client.post("/api/register", json={
            "username": "teacher01", "password": "x", "name": "다른 사람", "role": "teacher",
        })
        self.assertEqual(res.status_code, 409)


class TestStudentRoster(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()

    def test_create_and_list_ordered_by_number(self):
        for name, number in [("박", "2025003"), ("김", "2025001"), ("이", "2025002")]:
            res = self.client.post("/api/students", json={"name": name, "studentNumber": number})
            self.assertEqual(res.status_code, 201)
            self.assertEqual(res.json()["classRoom"], "5학년 7반")
            self.assertTrue(res.json()["isActive"])

        numbers = [s["studentNumber"] for s in self.client.get("/api/students").json()]
        self.assertEqual(numbers, ["2025001", "2025002", "2025003"])

    def test_create_missing_fields_is_400(self):
        self.assertEqual(self.client.post("/api/students", json={"name": "김"}).status_code, 400)
        res = self.client.post("/api/students", json={"name": "  ", "studentNumber": "2025001"})
        self.assertEqual(res.status_code, 400)

    def test_unencodable_input_is_still_400(self):
        # A lone surrogate decodes from JSON but cannot be re-encoded as UTF-8
        for body in ['{"name": "\\ud800", "studentNumber": 5}', '{"name": "\\ud800"}']:
            res = self.client.post("/api/students", content=body, headers={"Content-Type": "application/json"})
            self.assertEqual(res.status_code, 400, body)
            self.assertEqual(res.json()["detail"], "필수 정보가 누락되었거나 형식이 올바르지 않습니다.")
            for err in res.json()["errors"]:
                self.assertEqual(set(err), {"loc", "msg", "type"})

    def test_duplicate_student_number_is_409(self):
        self.client.post("/api/students", json={"name": "김", "studentNumber": "2025001"})
        res = self.client.post("/api/students", json={"name": "이", "studentNumber": "2025001"})
        self.assertEqual(res.status_code, 409)
        self.assertIn("detail", res.json())

    def test_update_student(self):
        student = self.client.post("/api/students", json={"name": "김", "studentNumber": "2025001"}).json()
        res = self.client.put(f"/api/students/{student['id']}", json={"classRoom": "5학년 8반"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["classRoom"], "5학년 8반")
        self.assertEqual(res.json()["name"], "김")

        self.assertEqual(self.client.put("/api/students/missing", json={"name": "x"}).status_code, 404)

    def test_soft_delete_keeps_history(self):
        """Deleted students leave the roster, their records and evaluations stay"""
        student = self.client.post("/api/students", json={"name": "김", "studentNumber": "2025010"}).json()
        record = self.create_record(studentId=student["id"], week=3)
        evaluation = self.client.post("/api/evaluations", json={
            "studentId": student["id"], "subject": "수학", "content": "잘함", "periodStart": 3, "periodEnd": 3,
        }).json()

        res = self.client.delete(f"/api/students/{student['id']}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(self.client.get("/api/students").json(), [])

        kept = self.client.get(f"/api/learning-records/{record['id']}")
        self.assertEqual(kept.status_code, 200)
        self.assertEqual(kept.json()["studentId"], student["id"])

        evaluations = self.client.get(f"/api/evaluations?studentId={student['id']}").json()
        self.assertEqual([e["id"] for e in evaluations], [evaluation["id"]])


class TestBulkStudents(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()

    def test_bulk_creates_linked_accounts(self):
        results = self.bulk_create([
            ("홍길동", "2025001", "student001", "password123"),
            ("김영희", "2025002", "student002", "password456"),
        ])
        self.assertEqual([r["success"] for r in results], [True, True])
        self.assertEqual(results[0]["user"]["username"], "student001")
        self.assertEqual(results[0]["user"]["role"], "student")
        self.assertNotIn("password", results[0]["user"])

        students = self.client.get("/api/students").json()
        self.assertEqual(len(students), 2)
        self.assertTrue(all(s["userId"] for s in students))

        # New account can log in with the plain password
        self.login("student002", "password456")
        self.assertEqual(self.client.get("/api/learning-records").status_code, 200)

    def test_empty_list_is_400(self):
        self.assertEqual(self.client.post("/api/students/bulk", json={"students": []}).status_code, 400)
        self.assertEqual(self.client.post("/api/students/bulk", json={}).status_code, 400)

    def test_malformed_row_rejects_whole_batch(self):
        payload = {"students": [
            {"name": "홍길동", "studentNumber": "2025001", "username": "student001", "password": "pw1"},
            {"name": "김영희", "studentNumber": "2025002", "username": "student002", "password": "  "},
        ]}
        res = self.client.post("/api/students/bulk", json=payload)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.client.get("/api/students").json(), [])

    def test_store_failure_does_not_block_siblings(self):
        self.bulk_create([("기존", "2025001", "taken", "pw")])

        results = self.bulk_create([
            ("첫째", "2025002", "first", "pw"),
            ("중복", "2025003", "taken", "pw"),
            ("셋째", "2025004", "third", "pw"),
        ])
        self.assertEqual([r["success"] for r in results], [True, False, True])
        self.assertEqual(results[1]["row"], 1)
        self.assertIsNone(results[1]["user"])
        self.assertTrue(results[1]["error"])

        numbers = [s["studentNumber"] for s in self.client.get("/api/students").json()]
        self.assertEqual(numbers, ["2025001", "2025002", "2025004"])

    def test_passwords_hashed_off_the_event_loop(self):
        on_loop = []

        def recording_hash(password):
            try:
                asyncio.get_running_loop()
                on_loop.append(True)
            except RuntimeError:
                on_loop.append(False)
            return hash_password(password)

        with mock.patch("classnote.routes.students.hash_password", recording_hash):
            results = self.bulk_create([
                ("홍길동", "2025001", "student001", "pw1"),
                ("김영희", "2025002", "student002", "pw2"),
            ])
        self.assertEqual([r["success"] for r in results], [True, True])
        self.assertEqual(on_loop, [False, False])

    def test_csv_text(self):
        text = "홍길동,2025001,student001,password123\n\n김영희, 2025002 ,student002,password456\n"
        res = self.client.post("/api/students/bulk-csv", json={"text": text})
        self.assertEqual(res.status_code, 201)
        self.assertEqual(len(res.json()), 2)
        self.assertTrue(self.student_id_for("2025002"))

    def test_csv_malformed_line_is_400(self):
        text = "홍길동,2025001,student001,password123\n김영희,2025002,student002,"
        res = self.client.post("/api/students/bulk-csv", json={"text": text})
        self.assertEqual(res.status_code, 400)
        self.assertIn("2번째", res.json()["detail"])
        self.assertEqual(self.client.get("/api/students").json(), [])


class TestResetPassword(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register_teacher()

    def test_reset_password(self):
        self.bulk_create([("홍길동", "2025001", "student001", "old-pass")])
        student_id = self.student_id_for("2025001")

        res = self.client.post(f"/api/students/{student_id}/reset-password", json={"newPassword": "new-pass"})
        self.assertEqual(res.status_code, 200)

        self.logout()
        bad = self.client.post("/api/login", json={"username": "student001", "password": "old-pass"})
        self.assertEqual(bad.status_code, 401)
        self.login("student001", "new-pass")

    def test_missing_password_is_400(self):
        self.bulk_create([("홍길동", "2025001", "student001", "old-pass")])
        student_id = self.student_id_for("2025001")
        res = self.client.post(f"/api/students/{student_id}/reset-password", json={})
        self.assertEqual(res.status_code, 400)

    def test_student_without_account_is_404(self):
        """Same generic answer as an unknown student, nothing changes"""
        student = self.client.post("/api/students", json={"name": "김", "studentNumber": "2025001"}).json()

        res = self.client.post(f"/api/students/{student['id']}/reset-password", json={"newPassword": "x"})
        self.assertEqual(res.status_code, 404)
        unknown = self.client.post("/api/students/nope/reset-password", json={"newPassword": "x"})
        self.assertEqual(unknown.status_code, 404)
        self.assertEqual(res.json()["detail"], unknown.json()["detail"])

        # Teacher account untouched
        self.logout()
        self.login_teacher()


if __name__ == "__main__":
    unittest.main()
