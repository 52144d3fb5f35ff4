from datetime import datetime, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient

from courses.models import Course, Enrollment, Quiz, QuizQuestion
from user_managment.models import Role, User


@pytest.fixture
def t0():
    return datetime(2024, 1, 1, 9, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def teacher(db):
    role, _ = Role.objects.get_or_create(name=Role.TEACHER)
    return User.objects.create_user(
        email="teacher@example.com", first_name="Tess", last_name="Teacher",
        password="pass1234", role=role,
    )


@pytest.fixture
def student(db):
    role, _ = Role.objects.get_or_create(name=Role.STUDENT)
    return User.objects.create_user(
        email="student@example.com", first_name="Sam", last_name="Student",
        password="pass1234", role=role,
    )


@pytest.fixture
def other_student(db):
    return User.objects.create_user(email="other@example.com", first_name="Olive", password="pass1234")


@pytest.fixture
def course(teacher):
    return Course.objects.create(title="Intro to Geography", instructor=teacher, status="published")


@pytest.fixture
def enrollment(student, course, t0):
    return Enrollment.objects.create(student=student, course=course, enrolled_at=t0)


@pytest.fixture
def quiz(course):
    return Quiz.objects.create(
        course=course, title="Capitals", passing_score=70, max_attempts=3, is_published=True,
    )


@pytest.fixture
def quiz_questions(quiz):
    """Two questions worth 3 points: multiple choice (1) and short answer (2)."""
    mc = QuizQuestion.objects.create(
        quiz=quiz,
        question_text="Capital of France?",
        question_type="multiple_choice",
        options=[{"text": "Paris", "is_correct": True}, {"text": "London", "is_correct": False}],
        points=1,
        order_index=0,
    )
    sa = QuizQuestion.objects.create(
        quiz=quiz,
        question_text="6 x 7?",
        question_type="short_answer",
        correct_answer="42",
        points=2,
        order_index=1,
    )
    return mc, sa


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def student_client(api_client, student):
    api_client.force_authenticate(user=student)
    return api_client


@pytest.fixture
def teacher_client(teacher):
    client = APIClient()
    client.force_authenticate(user=teacher)
    return client
