from django.urls import path
from .views import (
    TeacherQuizAttemptsView,
    StudentQuizReportView,
)

urlpatterns = [
    path('teacher/course/<int:course_id>/quiz-attempts/', TeacherQuizAttemptsView.as_view(), name='teacher_quiz_attempts'),
    path('student/course/<int:course_id>/quiz-report/', StudentQuizReportView.as_view(), name='student_quiz_report'),
]
