# views/base.py
import logging
from functools import wraps

from rest_framework import status
from rest_framework.response import Response

from courses.exceptions import CourseServiceError, NotCourseInstructor, NotEnrolled
from courses.models import Course, Enrollment

logger = logging.getLogger(__name__)


def success_response(data=None, message="", code=status.HTTP_200_OK):
    return Response({"success": True, "data": data, "message": message}, status=code)


def error_response(message, code=status.HTTP_400_BAD_REQUEST):
    return Response({"success": False, "message": message}, status=code)


def handle_service_errors(view):
    """Translate CourseServiceError raised by services into the response envelope."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except CourseServiceError as e:
            return error_response(e.message, e.status_code)
        except Course.DoesNotExist:
            return error_response("Course not found.", status.HTTP_404_NOT_FOUND)
    return wrapper


def is_course_instructor(user, course):
    return course.instructor_id == user.id or user.is_superuser


def get_instructed_course(user, course_id):
    """Course owned by the user; anyone else gets NotCourseInstructor."""
    course = Course.objects.get(pk=course_id)
    if not is_course_instructor(user, course):
        logger.warning(f"User {user.id} denied instructor access to course {course.id}")
        raise NotCourseInstructor()
    return course


def require_enrollment(user, course):
    """Students must be enrolled; the course instructor passes through."""
    if is_course_instructor(user, course):
        return
    if not Enrollment.objects.filter(student=user, course=course).exists():
        raise NotEnrolled()
