import logging

from courses.models import Enrollment

logger = logging.getLogger(__name__)


def enroll_user_in_course(user, course):
    """
    Enroll a user in a published course. Drip schedules start counting from
    the enrollment timestamp. Returns (success, message, enrollment).
    """
    if not course.is_visible:
        return False, "This course is not open for enrollment.", None

    enrollment, created = Enrollment.objects.get_or_create(student=user, course=course)
    if not created:
        return False, "Already enrolled in this course.", enrollment

    enrollment.calculate_progress()
    logger.info(f"User {user.id} enrolled in course {course.id}")
    return True, "Successfully enrolled in the course.", enrollment
