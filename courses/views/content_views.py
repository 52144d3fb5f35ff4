from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from courses.models import Course, CourseContent
from courses.serializers import ContentAccessSerializer, ContentScheduleRuleSerializer
from courses.services import access_service, progress_service, schedule_service
from .base import (
    get_instructed_course,
    handle_service_errors,
    is_course_instructor,
    success_response,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def get_course_content_view(request, course_id):
    """
    Content items of a course in order, with lock state and remaining time
    for the current student. Instructors see everything unlocked.
    """
    course = Course.objects.get(id=course_id)
    now = timezone.now()

    if is_course_instructor(request.user, course):
        contents = CourseContent.objects.filter(course=course)
        items = access_service.evaluate_content_access(contents, {}, now, set(), now)
    else:
        items = access_service.get_unlocked_content(request.user, course.id, now=now)

    serializer = ContentAccessSerializer(items, many=True, context={"now": now})
    return success_response(serializer.data, "Course content retrieved successfully.")


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def mark_content_completed_view(request, content_id):
    progress = progress_service.mark_content_completed(request.user, content_id)
    enrollment = progress.enrollment
    return success_response({
        "content_id": progress.content_id,
        "completed": progress.completed,
        "completed_at": progress.completed_at,
        "course_progress": float(enrollment.progress_percentage),
    }, "Content marked as completed.")


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def content_schedules_view(request, course_id):
    """
    GET: drip schedule of a course.
    POST: add a rule.
    Expected payload: {"content_id": 12, "unlock_after_days": 7}
                   or {"content_id": 12, "unlock_after_content_id": 11}
    """
    course = get_instructed_course(request.user, course_id)

    if request.method == 'GET':
        return success_response(
            schedule_service.list_content_schedules(course.id),
            "Content schedules retrieved successfully."
        )

    rule = schedule_service.add_content_schedule(
        course,
        request.data.get('content_id'),
        unlock_after_days=request.data.get('unlock_after_days'),
        unlock_after_content_id=request.data.get('unlock_after_content_id'),
    )
    data = ContentScheduleRuleSerializer(rule).data
    data['status'] = schedule_service.describe_schedule(rule)
    return success_response(data, "Content schedule added.", status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def remove_content_schedule_view(request, rule_id):
    rule = schedule_service.get_content_schedule(rule_id)
    course = get_instructed_course(request.user, rule.course_id)
    schedule_service.remove_content_schedule(rule.id, course=course)
    return success_response(None, "Content schedule removed.")
