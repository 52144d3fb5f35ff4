import pytest

from courses.models import ContentScheduleRule, CourseContent, Enrollment, Quiz, QuizAttempt

pytestmark = pytest.mark.django_db


def test_enroll_in_course(student_client, student, course):
    response = student_client.post(f"/api/courses/{course.id}/enroll/")

    assert response.status_code == 201
    assert response.data["success"] is True
    assert Enrollment.objects.filter(student=student, course=course).exists()


def test_enroll_in_missing_course(student_client):
    response = student_client.post("/api/courses/9999/enroll/")
    assert response.status_code == 404
    assert response.data["success"] is False


def test_unauthenticated_requests_rejected(api_client, quiz):
    response = api_client.get(f"/api/quizzes/{quiz.id}/questions/")
    assert response.status_code == 401


def test_student_questions_hide_answers(student_client, enrollment, quiz, quiz_questions):
    response = student_client.get(f"/api/quizzes/{quiz.id}/questions/")

    assert response.status_code == 200
    questions = response.data["data"]["questions"]
    assert len(questions) == 2
    assert "correct_answer" not in questions[1]
    assert questions[0]["options"] == [{"text": "Paris"}, {"text": "London"}]


def test_instructor_sees_answers(teacher_client, quiz, quiz_questions):
    response = teacher_client.get(f"/api/quizzes/{quiz.id}/questions/")

    assert response.status_code == 200
    assert response.data["data"]["questions"][1]["correct_answer"] == "42"


def test_questions_require_enrollment(student_client, quiz, quiz_questions):
    response = student_client.get(f"/api/quizzes/{quiz.id}/questions/")
    assert response.status_code == 403


def test_unpublished_quiz_hidden_from_students(student_client, enrollment, quiz):
    Quiz.objects.filter(id=quiz.id).update(is_published=False)
    response = student_client.post(f"/api/quizzes/{quiz.id}/start/")
    assert response.status_code == 404


def test_start_and_submit_attempt(student_client, enrollment, quiz, quiz_questions):
    mc, sa = quiz_questions
    start = student_client.post(f"/api/quizzes/{quiz.id}/start/")
    assert start.status_code == 201
    attempt_id = start.data["data"]["id"]
    assert start.data["data"]["state"] == "in_progress"

    submit = student_client.post(
        f"/api/quizzes/{quiz.id}/attempts/{attempt_id}/submit/",
        {"answers": {str(mc.id): "Paris", str(sa.id): " 42 "}},
        format="json",
    )

    assert submit.status_code == 200
    data = submit.data["data"]
    assert data["state"] == "graded"
    assert data["score"] == 3
    assert data["percentage"] == 100.0
    assert data["passed"] is True


def test_second_submit_conflicts(student_client, enrollment, quiz, quiz_questions):
    attempt_id = student_client.post(f"/api/quizzes/{quiz.id}/start/").data["data"]["id"]
    url = f"/api/quizzes/{quiz.id}/attempts/{attempt_id}/submit/"

    assert student_client.post(url, {"answers": {}}, format="json").status_code == 200
    response = student_client.post(url, {"answers": {}}, format="json")

    assert response.status_code == 409
    assert response.data["success"] is False


def test_fourth_attempt_rejected(student_client, student, enrollment, quiz):
    for _ in range(3):
        assert student_client.post(f"/api/quizzes/{quiz.id}/start/").status_code == 201

    response = student_client.post(f"/api/quizzes/{quiz.id}/start/")

    assert response.status_code == 400
    assert "No attempts remaining" in response.data["message"]
    assert QuizAttempt.objects.filter(quiz=quiz, student=student).count() == 3


def test_answers_must_be_an_object(student_client, enrollment, quiz):
    attempt_id = student_client.post(f"/api/quizzes/{quiz.id}/start/").data["data"]["id"]
    response = student_client.post(
        f"/api/quizzes/{quiz.id}/attempts/{attempt_id}/submit/", {"answers": ["Paris"]}, format="json"
    )
    assert response.status_code == 400


def test_attempt_history_with_summary(student_client, enrollment, quiz):
    student_client.post(f"/api/quizzes/{quiz.id}/start/")

    response = student_client.get(f"/api/quizzes/{quiz.id}/attempts/")

    assert response.status_code == 200
    assert len(response.data["data"]["attempts"]) == 1
    assert response.data["data"]["summary"]["attempts_remaining"] == 2


def test_course_quizzes_list_only_published(student_client, enrollment, course, quiz):
    Quiz.objects.create(course=course, title="Draft quiz", is_published=False)

    response = student_client.get(f"/api/courses/{course.id}/quizzes/")

    assert response.status_code == 200
    assert [q["title"] for q in response.data["data"]] == ["Capitals"]
    assert response.data["data"][0]["summary"]["max_attempts"] == 3


def test_instructor_creates_quiz_and_questions(teacher_client, course):
    created = teacher_client.post(
        f"/api/courses/{course.id}/quizzes/create/",
        {"title": "Rivers", "passing_score": 60, "is_published": True},
        format="json",
    )
    assert created.status_code == 201
    quiz_id = created.data["data"]["id"]

    saved = teacher_client.put(
        f"/api/quizzes/{quiz_id}/questions/save/",
        {"questions": [
            {"question_text": "Longest river?", "question_type": "multiple_choice",
             "options": [{"text": "Nile", "is_correct": True}, {"text": "Thames", "is_correct": False}]},
        ]},
        format="json",
    )
    assert saved.status_code == 200
    assert len(saved.data["data"]) == 1


def test_invalid_question_payload_rejected(teacher_client, quiz):
    response = teacher_client.put(
        f"/api/quizzes/{quiz.id}/questions/save/",
        {"questions": [{"question_text": "Pick", "question_type": "multiple_choice",
                        "options": [{"text": "A"}, {"text": "B"}]}]},
        format="json",
    )
    assert response.status_code == 400
    assert "exactly one" in response.data["message"]


def test_students_cannot_author_quizzes(student_client, enrollment, course, quiz):
    create = student_client.post(f"/api/courses/{course.id}/quizzes/create/", {"title": "Mine"}, format="json")
    update = student_client.patch(f"/api/quizzes/{quiz.id}/", {"title": "Hacked"}, format="json")

    assert create.status_code == 403
    assert update.status_code == 403
    quiz.refresh_from_db()
    assert quiz.title == "Capitals"


def test_instructor_updates_quiz(teacher_client, quiz):
    response = teacher_client.patch(f"/api/quizzes/{quiz.id}/", {"max_attempts": 5}, format="json")
    assert response.status_code == 200
    assert response.data["data"]["max_attempts"] == 5


def test_course_content_reports_lock_state(student_client, course, enrollment):
    first = CourseContent.objects.create(course=course, title="Welcome", order_index=0)
    second = CourseContent.objects.create(course=course, title="Week 2", order_index=1)
    ContentScheduleRule.objects.create(course=course, content=second, unlock_after_content=first)

    response = student_client.get(f"/api/courses/{course.id}/content/")

    assert response.status_code == 200
    items = response.data["data"]
    assert [item["is_unlocked"] for item in items] == [True, False]
    assert items[1]["time_until_unlock"] is None

    assert student_client.post(f"/api/content/{second.id}/complete/").status_code == 403
    assert student_client.post(f"/api/content/{first.id}/complete/").status_code == 200

    items = student_client.get(f"/api/courses/{course.id}/content/").data["data"]
    assert items[1]["is_unlocked"] is True


def test_course_progress(student_client, course, enrollment):
    content = CourseContent.objects.create(course=course, title="Only item")
    student_client.post(f"/api/content/{content.id}/complete/")

    response = student_client.get(f"/api/courses/{course.id}/progress/")

    assert response.status_code == 200
    assert response.data["data"]["progress_percentage"] == 100.0


def test_schedule_management(teacher_client, course):
    content = CourseContent.objects.create(course=course, title="Bonus", order_index=3)

    created = teacher_client.post(
        f"/api/courses/{course.id}/schedules/", {"content_id": content.id, "unlock_after_days": 2}, format="json"
    )
    assert created.status_code == 201
    assert created.data["data"]["status"] == "2 days"

    listed = teacher_client.get(f"/api/courses/{course.id}/schedules/")
    assert len(listed.data["data"]) == 1

    removed = teacher_client.delete(f"/api/schedules/{created.data['data']['id']}/")
    assert removed.status_code == 200
    assert not ContentScheduleRule.objects.exists()


def test_students_cannot_manage_schedules(student_client, course, enrollment):
    response = student_client.get(f"/api/courses/{course.id}/schedules/")
    assert response.status_code == 403
    assert response.data["message"] == "Not authorized"


@pytest.mark.parametrize("order_index", ["abc", -1])
def test_malformed_question_order_rejected(teacher_client, quiz, quiz_questions, order_index):
    response = teacher_client.put(
        f"/api/quizzes/{quiz.id}/questions/save/",
        {"questions": [{"question_text": "6 x 7?", "question_type": "short_answer",
                        "correct_answer": "42", "order_index": order_index}]},
        format="json",
    )
    assert response.status_code == 400
    assert response.data["success"] is False
    assert quiz.questions.count() == 2


def test_zero_point_question_rejected(teacher_client, quiz):
    response = teacher_client.put(
        f"/api/quizzes/{quiz.id}/questions/save/",
        {"questions": [{"question_text": "6 x 7?", "question_type": "short_answer",
                        "correct_answer": "42", "points": 0}]},
        format="json",
    )
    assert response.status_code == 400


@pytest.mark.parametrize("payload", [
    {"content_id": "abc", "unlock_after_days": 1},
    {"unlock_after_content_id": "xyz"},
])
def test_malformed_schedule_ids_rejected(teacher_client, course, payload):
    target = CourseContent.objects.create(course=course, title="Week 3", order_index=2)
    payload = {"content_id": target.id, **payload}

    response = teacher_client.post(f"/api/courses/{course.id}/schedules/", payload, format="json")

    assert response.status_code == 400
    assert not ContentScheduleRule.objects.exists()
