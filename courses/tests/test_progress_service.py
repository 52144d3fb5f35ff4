from datetime import timedelta

import pytest

from courses.exceptions import ContentLocked, ContentNotFound, NotEnrolled
from courses.models import ContentScheduleRule, CourseContent
from courses.services import enrollment_service, progress_service


@pytest.fixture
def lessons(course):
    return [
        CourseContent.objects.create(course=course, title=f"Part {i}", order_index=i)
        for i in range(2)
    ]


@pytest.mark.django_db
def test_completion_updates_enrollment_progress(student, enrollment, lessons, t0):
    progress = progress_service.mark_content_completed(student, lessons[0].id, now=t0)

    enrollment.refresh_from_db()
    assert progress.completed is True
    assert progress.completed_at == t0
    assert float(enrollment.progress_percentage) == 50.0
    assert enrollment.completed_at is None


@pytest.mark.django_db
def test_completing_every_item_completes_course(student, enrollment, lessons, t0):
    for lesson in lessons:
        progress_service.mark_content_completed(student, lesson.id, now=t0)

    report = progress_service.get_course_progress(student, enrollment.course_id)
    assert report["progress_percentage"] == 100.0
    assert report["completed_at"] is not None
    assert {row["content_id"] for row in report["completed_content"]} == {lesson.id for lesson in lessons}


@pytest.mark.django_db
def test_completing_twice_keeps_first_timestamp(student, enrollment, lessons, t0):
    progress_service.mark_content_completed(student, lessons[0].id, now=t0)
    progress = progress_service.mark_content_completed(student, lessons[0].id, now=t0 + timedelta(days=1))
    assert progress.completed_at == t0


@pytest.mark.django_db
def test_locked_item_cannot_be_completed(student, course, enrollment, lessons, t0):
    ContentScheduleRule.objects.create(course=course, content=lessons[1], unlock_after_content=lessons[0])

    with pytest.raises(ContentLocked):
        progress_service.mark_content_completed(student, lessons[1].id, now=t0)

    progress_service.mark_content_completed(student, lessons[0].id, now=t0)
    assert progress_service.mark_content_completed(student, lessons[1].id, now=t0).completed


@pytest.mark.django_db
def test_completion_requires_enrollment(student, lessons):
    with pytest.raises(NotEnrolled):
        progress_service.mark_content_completed(student, lessons[0].id)


@pytest.mark.django_db
def test_unknown_content(student):
    with pytest.raises(ContentNotFound):
        progress_service.mark_content_completed(student, 9999)


@pytest.mark.django_db
def test_enroll_once(student, course):
    success, _, enrollment = enrollment_service.enroll_user_in_course(student, course)
    assert success is True
    assert enrollment.enrolled_at is not None

    success, message, _ = enrollment_service.enroll_user_in_course(student, course)
    assert success is False
    assert message == "Already enrolled in this course."


@pytest.mark.django_db
def test_draft_course_closed_for_enrollment(student, course):
    course.status = "draft"
    course.save()
    success, _, enrollment = enrollment_service.enroll_user_in_course(student, course)
    assert success is False
    assert enrollment is None
