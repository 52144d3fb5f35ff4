import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from courses.models import Course, Enrollment
from courses.services.pagination import paginate_queryset_or_list
from .services import GradingService

logger = logging.getLogger(__name__)


class TeacherQuizAttemptsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, course_id):
        """
        Returns the submitted quiz attempts of a course for its instructor.
        """
        course = get_object_or_404(Course, pk=course_id)
        if course.instructor != request.user and not request.user.is_superuser:
            logger.warning(f"User {request.user.id} denied gradebook for course {course.id}")
            return Response({"success": False, "message": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)

        rows = GradingService.get_course_quiz_attempts(course.id)
        return paginate_queryset_or_list(request, rows, message="Quiz attempts retrieved successfully.")


class StudentQuizReportView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, course_id):
        """
        Returns the quiz report for the requesting student.
        """
        course = get_object_or_404(Course, pk=course_id)
        if not Enrollment.objects.filter(student=request.user, course=course).exists():
            return Response(
                {"success": False, "message": "You are not enrolled in this course."},
                status=status.HTTP_403_FORBIDDEN
            )

        report = GradingService.get_student_quiz_report(request.user, course.id)
        return Response({"success": True, "data": report, "message": "Quiz report retrieved successfully."})
