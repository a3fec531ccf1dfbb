import uuid

import pytest


@pytest.fixture
def course_id(client):
    response = client.post("/api/admin/courses", json={
        "title": "Networks",
        "attendance_weight": 20,
        "assignment_weight": 50,
        "exam_weight": 30,
        "weeks_count": 2,
        "assignment_count": 1,
        "exam_count": 1,
    })
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def student():
    return {"X-Student-Id": str(uuid.uuid4())}


def _catalog(client, course_id):
    return client.get(f"/api/admin/courses/{course_id}/catalog").json()["items"]


def test_invalid_weights_return_400(client):
    response = client.post("/api/admin/courses", json={
        "title": "Broken",
        "attendance_weight": 10,
        "assignment_weight": 10,
        "exam_weight": 10,
    })
    assert response.status_code == 400


def test_catalog_cannot_be_provisioned_twice(client, course_id):
    assert len(_catalog(client, course_id)) == 4
    response = client.post(
        f"/api/admin/courses/{course_id}/catalog",
        json={"weeks_count": 1, "assignment_count": 1, "exam_count": 1},
    )
    assert response.status_code == 409


def test_enroll_submit_grade_flow(client, course_id, student):
    response = client.post(f"/api/student/courses/{course_id}/enroll", headers=student)
    assert response.status_code == 201
    assert response.json()["grade_items_count"]["total"] == 4

    again = client.post(f"/api/student/courses/{course_id}/enroll", headers=student)
    assert again.status_code == 409

    assignment = [i for i in _catalog(client, course_id) if i["category"] == "ASSIGNMENT"][0]
    submitted = client.post(
        f"/api/student/items/{assignment['id']}/submissions",
        json={"submission_data": {"file": "report.pdf"}},
        headers=student,
    )
    assert submitted.status_code == 200
    assert submitted.json()["state"] == "SUBMITTED"

    student_id = student["X-Student-Id"]
    graded = client.put(
        f"/api/admin/courses/{course_id}/items/{assignment['id']}/students/{student_id}/grade",
        json={"score": 80, "feedback": "Well structured"},
    )
    assert graded.status_code == 200
    body = graded.json()
    assert body["grade"]["is_completed"] is True
    assert body["recalculation"]["target"] == "SUMMARY"
    assert body["recalculation"]["result"]["weighted_total"] == pytest.approx(40.0)

    grades = client.get(f"/api/student/courses/{course_id}/grades", headers=student).json()
    assert grades["grade"]["assignment_avg"] == pytest.approx(80.0)


def test_out_of_range_score_returns_400(client, course_id, student):
    client.post(f"/api/student/courses/{course_id}/enroll", headers=student)
    exam = [i for i in _catalog(client, course_id) if i["category"] == "EXAM"][0]

    response = client.put(
        f"/api/admin/courses/{course_id}/items/{exam['id']}/students/{student['X-Student-Id']}/grade",
        json={"score": 101},
    )
    assert response.status_code == 400


def test_attendance_items_are_not_submittable(client, course_id, student):
    client.post(f"/api/student/courses/{course_id}/enroll", headers=student)
    week = [i for i in _catalog(client, course_id) if i["category"] == "ATTENDANCE"][0]

    response = client.post(
        f"/api/student/items/{week['id']}/submissions",
        json={"submission_data": {}},
        headers=student,
    )
    assert response.status_code == 400


def test_grades_require_enrollment(client, course_id, student):
    response = client.get(f"/api/student/courses/{course_id}/grades", headers=student)
    assert response.status_code == 403


def test_missing_student_header_is_rejected(client, course_id):
    response = client.post(f"/api/student/courses/{course_id}/enroll")
    assert response.status_code == 422


def test_attendance_payload_validation(client, course_id, student):
    client.post(f"/api/student/courses/{course_id}/enroll", headers=student)

    response = client.post(f"/api/admin/courses/{course_id}/attendance", json={
        "student_id": student["X-Student-Id"],
        "session_id": "live-1",
        "duration_seconds": 4000,
        "total_duration_seconds": 3600,
        "attendance_date": "2026-02-01",
    })
    assert response.status_code == 422

    response = client.post(f"/api/admin/courses/{course_id}/attendance", json={
        "student_id": student["X-Student-Id"],
        "session_id": "live-1",
        "duration_seconds": 3600,
        "total_duration_seconds": 3600,
        "attendance_date": "2026-02-01",
    })
    assert response.status_code == 200
    assert response.json()["result"]["attendance_rate"] == pytest.approx(100.0)


def test_statistics_and_export(client, course_id, student):
    client.post(f"/api/student/courses/{course_id}/enroll", headers=student)

    stats = client.get(f"/api/admin/courses/{course_id}/statistics")
    assert stats.status_code == 200
    assert len(stats.json()["items"]) == 4

    export = client.get(f"/api/admin/courses/{course_id}/export")
    assert export.status_code == 200
    assert export.json()[0]["student_id"] == student["X-Student-Id"]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_item_under_wrong_course_returns_404(client, course_id, student):
    client.post(f"/api/student/courses/{course_id}/enroll", headers=student)
    exam = [i for i in _catalog(client, course_id) if i["category"] == "EXAM"][0]
    other = client.post("/api/admin/courses", json={
        "title": "Other",
        "attendance_weight": 20,
        "assignment_weight": 50,
        "exam_weight": 30,
    }).json()["id"]

    graded = client.put(
        f"/api/admin/courses/{other}/items/{exam['id']}/students/{student['X-Student-Id']}/grade",
        json={"score": 50},
    )
    assert graded.status_code == 404
    assert client.get(f"/api/admin/courses/{other}/items/{exam['id']}/submissions").status_code == 404
    assert client.patch(f"/api/admin/courses/{other}/items/{exam['id']}", json={"name": "X"}).status_code == 404
