import logging

from courses.models import Quiz, QuizAttempt

logger = logging.getLogger(__name__)


class GradingService:

    @staticmethod
    def attempt_row(attempt):
        return {
            'attempt_id': attempt.id,
            'quiz_id': attempt.quiz_id,
            'quiz_title': attempt.quiz.title,
            'student_id': attempt.student_id,
            'student_name': attempt.student.get_full_name(),
            'student_email': attempt.student.email,
            'score': attempt.score,
            'max_score': attempt.max_score,
            'percentage': attempt.percentage,
            'passed': attempt.passed,
            'is_late': attempt.is_late,
            'started_at': attempt.started_at,
            'submitted_at': attempt.submitted_at,
        }

    @staticmethod
    def get_course_quiz_attempts(course_id):
        """
        All submitted attempts across the quizzes of a course, most recent
        submission first. In-progress attempts are left out of the gradebook.
        """
        attempts = (
            QuizAttempt.objects.filter(quiz__course_id=course_id, submitted_at__isnull=False)
            .select_related('quiz', 'student')
            .order_by('-submitted_at', '-id')
        )
        return [GradingService.attempt_row(a) for a in attempts]

    @staticmethod
    def get_student_quiz_report(student, course_id):
        """
        Per published quiz of the course: attempts used, best percentage and
        whether any attempt passed.
        """
        quizzes = Quiz.objects.filter(course_id=course_id, is_published=True).order_by('order_index', 'id')
        attempts = QuizAttempt.objects.filter(
            quiz__in=quizzes, student=student
        ).select_related('quiz')

        by_quiz = {}
        for attempt in attempts:
            by_quiz.setdefault(attempt.quiz_id, []).append(attempt)

        report = []
        for quiz in quizzes:
            quiz_attempts = by_quiz.get(quiz.id, [])
            graded = [a for a in quiz_attempts if a.is_submitted]
            percentages = [a.percentage for a in graded]
            max_attempts = quiz.effective_max_attempts
            report.append({
                'quiz_id': quiz.id,
                'quiz_title': quiz.title,
                'passing_score': quiz.effective_passing_score,
                'max_attempts': max_attempts,
                'attempts_used': len(quiz_attempts),
                'attempts_remaining': max(max_attempts - len(quiz_attempts), 0),
                'best_percentage': max(percentages) if percentages else None,
                'passed': any(a.passed for a in graded),
            })

        total = len(report)
        passed = sum(1 for row in report if row['passed'])
        logger.debug(f"Built quiz report for student {student.id} in course {course_id}: {passed}/{total} passed")
        return {
            'course_id': int(course_id),
            'quizzes': report,
            'quizzes_passed': passed,
            'quizzes_total': total,
        }
