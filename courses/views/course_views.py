from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from courses.models import Course
from courses.serializers import EnrollmentSerializer
from courses.services.enrollment_service import enroll_user_in_course
from .base import error_response, handle_service_errors, success_response


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def enroll_in_course_view(request, course_id):
    """
    Enroll the authenticated user in a course.
    """
    course = Course.objects.get(id=course_id)
    success, message, enrollment = enroll_user_in_course(request.user, course)
    if not success:
        return error_response(message)
    return success_response(EnrollmentSerializer(enrollment).data, message, status.HTTP_201_CREATED)
