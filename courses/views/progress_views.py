from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from courses.services.progress_service import get_course_progress
from .base import handle_service_errors, success_response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def get_course_progress_view(request, course_id):
    """
    Progress of the authenticated user in one course, with the completed items.
    """
    return success_response(get_course_progress(request.user, course_id), "Course progress retrieved successfully.")
