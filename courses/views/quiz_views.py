from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from courses.exceptions import QuizNotFound
from courses.models import Course, Quiz
from courses.serializers import (
    QuizAttemptSerializer,
    QuizQuestionSerializer,
    QuizSerializer,
    StudentQuizQuestionSerializer,
)
from courses.services import quiz_service
from .base import (
    error_response,
    get_instructed_course,
    handle_service_errors,
    is_course_instructor,
    require_enrollment,
    success_response,
)


def _quiz_fields(data):
    return {key: data.get(key) for key in quiz_service.QUIZ_EDITABLE_FIELDS if key in data}


def _get_quiz_for_user(user, quiz_id):
    """
    Quiz visible to the user: instructors see their drafts, enrolled students
    only published quizzes.
    """
    try:
        quiz = Quiz.objects.select_related('course').get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizNotFound()
    if is_course_instructor(user, quiz.course):
        return quiz
    if not quiz.is_published:
        raise QuizNotFound()
    require_enrollment(user, quiz.course)
    return quiz


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def list_course_quizzes_view(request, course_id):
    """
    Published quizzes of a course with the student's attempt summary for each.
    """
    course = Course.objects.get(pk=course_id)
    require_enrollment(request.user, course)

    data = []
    for quiz in quiz_service.list_published_quizzes(course.id):
        item = QuizSerializer(quiz).data
        item["summary"] = quiz_service.get_attempt_summary(quiz, request.user)
        data.append(item)
    return success_response(data, "Quizzes retrieved successfully.")


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def create_quiz_view(request, course_id):
    """
    Create a quiz in a course the user teaches.
    Expected payload: {"title": "...", "passing_score": 70, "max_attempts": 3,
                       "time_limit_minutes": 20, "is_published": false}
    """
    course = get_instructed_course(request.user, course_id)
    if not request.data.get('title'):
        return error_response("Title is required.")
    quiz = quiz_service.create_quiz(course, **_quiz_fields(request.data))
    return success_response(QuizSerializer(quiz).data, "Quiz created successfully.", status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def update_quiz_view(request, quiz_id):
    try:
        quiz = Quiz.objects.select_related('course').get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizNotFound()
    get_instructed_course(request.user, quiz.course_id)
    quiz = quiz_service.update_quiz(quiz.id, **_quiz_fields(request.data))
    return success_response(QuizSerializer(quiz).data, "Quiz updated successfully.")


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def save_quiz_questions_view(request, quiz_id):
    """
    Replace all questions of a quiz.
    Expected payload: {
        "questions": [
            {"question_text": "Capital of France?", "question_type": "multiple_choice", "points": 1,
             "options": [{"text": "Paris", "is_correct": true}, {"text": "London", "is_correct": false}]},
            {"question_text": "6 x 7?", "question_type": "short_answer", "points": 2, "correct_answer": "42"}
        ]
    }
    """
    try:
        quiz = Quiz.objects.select_related('course').get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizNotFound()
    get_instructed_course(request.user, quiz.course_id)

    questions = quiz_service.save_quiz_questions(quiz.id, request.data.get('questions'))
    return success_response(
        QuizQuestionSerializer(questions, many=True).data,
        "Questions saved successfully."
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def get_quiz_questions_view(request, quiz_id):
    """
    Questions of a quiz in order. Students get them without correct answers.
    """
    quiz = _get_quiz_for_user(request.user, quiz_id)
    questions = quiz_service.get_quiz_questions(quiz.id)

    if is_course_instructor(request.user, quiz.course):
        question_data = QuizQuestionSerializer(questions, many=True).data
    else:
        question_data = StudentQuizQuestionSerializer(questions, many=True).data

    return success_response({
        "quiz": QuizSerializer(quiz).data,
        "questions": question_data,
    }, "Quiz questions retrieved successfully.")


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def start_quiz_attempt_view(request, quiz_id):
    """
    Start a new quiz attempt for the current student.
    """
    quiz = _get_quiz_for_user(request.user, quiz_id)
    attempt = quiz_service.start_attempt(quiz.id, request.user)
    return success_response(
        QuizAttemptSerializer(attempt).data,
        "Quiz attempt started.",
        status.HTTP_201_CREATED
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def submit_quiz_view(request, quiz_id, attempt_id):
    """
    Submit answers for an open attempt.
    Expected payload: {"answers": {"<question_id>": "Paris", "<question_id>": "42"}}
    Unanswered questions score zero.
    """
    answers = request.data.get('answers', {})
    if answers is None:
        answers = {}
    if not isinstance(answers, dict):
        return error_response("Answers must be an object keyed by question id.")

    attempt = quiz_service.submit_attempt(quiz_id, attempt_id, answers, student=request.user)
    data = QuizAttemptSerializer(attempt).data
    message = "Quiz passed!" if attempt.passed else "Quiz completed."
    return success_response(data, message)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@handle_service_errors
def get_quiz_attempt_history_view(request, quiz_id):
    """
    The current student's attempts on a quiz, most recent first, with summary.
    """
    quiz = _get_quiz_for_user(request.user, quiz_id)
    attempts = quiz_service.get_student_attempts(quiz.id, request.user)
    return success_response({
        "attempts": QuizAttemptSerializer(attempts, many=True).data,
        "summary": quiz_service.get_attempt_summary(quiz, request.user, attempts=attempts),
    }, "Quiz attempt history retrieved successfully.")
