from datetime import timedelta

import pytest

from courses.models import Quiz, QuizAttempt
from grading.services import GradingService

pytestmark = pytest.mark.django_db


def _graded(quiz, student, score, max_score, submitted_at, passed):
    return QuizAttempt.objects.create(
        quiz=quiz, student=student, started_at=submitted_at - timedelta(minutes=5),
        submitted_at=submitted_at, graded_at=submitted_at,
        score=score, max_score=max_score, passed=passed,
    )


def test_gradebook_lists_submitted_attempts_latest_first(quiz, student, other_student, t0):
    older = _graded(quiz, student, 1, 3, t0, False)
    newer = _graded(quiz, other_student, 3, 3, t0 + timedelta(hours=1), True)
    QuizAttempt.objects.create(quiz=quiz, student=student, started_at=t0 + timedelta(hours=2))

    rows = GradingService.get_course_quiz_attempts(quiz.course_id)

    assert [row["attempt_id"] for row in rows] == [newer.id, older.id]
    assert rows[0]["student_name"] == "Olive"
    assert rows[0]["percentage"] == 100.0
    assert rows[1]["percentage"] == 33.3


def test_student_report_best_result_per_quiz(course, quiz, student, t0):
    Quiz.objects.create(course=course, title="Rivers", is_published=True, order_index=1)
    _graded(quiz, student, 1, 3, t0, False)
    _graded(quiz, student, 3, 3, t0 + timedelta(days=1), True)

    report = GradingService.get_student_quiz_report(student, course.id)

    capitals, rivers = report["quizzes"]
    assert capitals["attempts_used"] == 2
    assert capitals["attempts_remaining"] == 1
    assert capitals["best_percentage"] == 100.0
    assert capitals["passed"] is True
    assert rivers["attempts_used"] == 0
    assert rivers["best_percentage"] is None
    assert report["quizzes_passed"] == 1
    assert report["quizzes_total"] == 2


def test_gradebook_view_restricted_to_instructor(student_client, teacher_client, course, quiz, student, t0):
    _graded(quiz, student, 2, 3, t0, False)

    denied = student_client.get(f"/api/grading/teacher/course/{course.id}/quiz-attempts/")
    allowed = teacher_client.get(f"/api/grading/teacher/course/{course.id}/quiz-attempts/")

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.data["count"] == 1


def test_student_report_view_requires_enrollment(student_client, course, enrollment, quiz):
    response = student_client.get(f"/api/grading/student/course/{course.id}/quiz-report/")

    assert response.status_code == 200
    assert response.data["data"]["quizzes_total"] == 1
