import logging

from django.utils import timezone

from ..exceptions import ContentLocked, ContentNotFound, NotEnrolled
from ..models import ContentProgress, CourseContent, Enrollment
from .access_service import is_content_unlocked

logger = logging.getLogger(__name__)


def mark_content_completed(user, content_id, now=None):
    """
    Mark a content item as completed for the user.
    Records the completion (which may unlock dependent items) and cascades
    to the enrollment progress. Locked items cannot be completed.
    """
    now = now or timezone.now()
    try:
        content = CourseContent.objects.select_related('course').get(id=content_id)
    except CourseContent.DoesNotExist:
        raise ContentNotFound()

    try:
        enrollment = Enrollment.objects.get(student=user, course=content.course)
    except Enrollment.DoesNotExist:
        raise NotEnrolled()

    if not is_content_unlocked(user, content, now=now):
        logger.warning(f"User {user.id} tried to complete locked content {content.id}")
        raise ContentLocked("This content is locked. Complete the prerequisite or wait for it to unlock.")

    progress, _ = ContentProgress.objects.get_or_create(enrollment=enrollment, content=content)
    already_completed = progress.completed
    progress.mark_completed(completed_at=now)

    if not already_completed:
        logger.info(f"User {user.id} completed content {content.id} in course {content.course_id}")

    return progress


def get_course_progress(user, course_id):
    try:
        enrollment = Enrollment.objects.get(student=user, course_id=course_id)
    except Enrollment.DoesNotExist:
        raise NotEnrolled()
    completed = ContentProgress.objects.filter(enrollment=enrollment, completed=True).select_related('content')
    return {
        'course_id': enrollment.course_id,
        'enrolled_at': enrollment.enrolled_at,
        'progress_percentage': float(enrollment.progress_percentage),
        'completed_at': enrollment.completed_at,
        'completed_content': [
            {'content_id': p.content_id, 'title': p.content.title, 'completed_at': p.completed_at}
            for p in completed
        ],
    }
