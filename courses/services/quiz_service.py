import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..constants import DEFAULT_PASSING_SCORE, DEFAULT_QUESTION_POINTS, MULTIPLE_CHOICE, SHORT_ANSWER
from ..exceptions import (
    AlreadySubmitted,
    AttemptDeadlinePassed,
    AttemptLimitExceeded,
    AttemptNotFound,
    InvalidQuestion,
    InvalidQuiz,
    QuizNotFound,
)
from ..models import Quiz, QuizAttempt, QuizQuestion

logger = logging.getLogger(__name__)

QUIZ_EDITABLE_FIELDS = (
    'title', 'description', 'passing_score', 'max_attempts',
    'time_limit_minutes', 'is_published', 'order_index',
)


# ---------------------------------------------------------------------------
# Gradable question variants, parsed once from the stored rows
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChoiceOption:
    text: str
    is_correct: bool = False


@dataclass(frozen=True)
class MultipleChoiceQuestion:
    id: int
    points: int
    options: tuple

    @property
    def correct_option(self) -> Optional[ChoiceOption]:
        return next((opt for opt in self.options if opt.is_correct), None)


@dataclass(frozen=True)
class ShortAnswerQuestion:
    id: int
    points: int
    correct_answer: str


@dataclass(frozen=True)
class GradeResult:
    score: int
    max_score: int
    percentage: float
    passed: bool


def parse_question(question):
    """
    Convert a QuizQuestion row into its typed variant.
    Raises InvalidQuestion for an unknown question_type.
    """
    points = question.points or DEFAULT_QUESTION_POINTS
    if question.question_type == MULTIPLE_CHOICE:
        options = tuple(
            ChoiceOption(text=str(opt.get('text', '')), is_correct=bool(opt.get('is_correct')))
            for opt in (question.options or [])
            if isinstance(opt, dict)
        )
        return MultipleChoiceQuestion(id=question.id, points=points, options=options)
    if question.question_type == SHORT_ANSWER:
        return ShortAnswerQuestion(id=question.id, points=points, correct_answer=question.correct_answer or '')
    raise InvalidQuestion(f"Unsupported question type '{question.question_type}' on question {question.id}.")


def normalize_answer(value):
    return (value or '').strip().lower()


def normalize_answers(answers):
    """Answers arrive keyed by question id; JSON storage keys them by string."""
    if not answers:
        return {}
    if not isinstance(answers, dict):
        raise InvalidQuestion("Answers must be an object keyed by question id.")
    return {str(key): (None if value is None else str(value)) for key, value in answers.items()}


def score_question(question, answer):
    """
    Points earned for a single answer. A missing answer earns nothing, as does
    a multiple choice question without an option flagged correct.
    """
    if answer is None:
        return 0
    if isinstance(question, ShortAnswerQuestion):
        expected = normalize_answer(question.correct_answer)
        if expected and normalize_answer(answer) == expected:
            return question.points
        return 0
    if isinstance(question, MultipleChoiceQuestion):
        correct = question.correct_option
        if correct is not None and answer == correct.text:
            return question.points
        return 0
    raise InvalidQuestion(f"Cannot score question of type {type(question).__name__}.")


def grade_answers(questions, answers, passing_score=None):
    """
    Score a full answer sheet.

    max_score covers every question whether answered or not. An empty quiz
    grades as 0% rather than dividing by zero.
    """
    if passing_score is None:
        passing_score = getattr(settings, 'QUIZ_DEFAULT_PASSING_SCORE', DEFAULT_PASSING_SCORE)
    answers = normalize_answers(answers)

    score = 0
    max_score = 0
    for question in questions:
        max_score += question.points
        score += score_question(question, answers.get(str(question.id)))

    percentage = (score / max_score * 100) if max_score else 0.0
    return GradeResult(
        score=score,
        max_score=max_score,
        percentage=round(percentage, 1),
        passed=percentage >= passing_score,
    )


# ---------------------------------------------------------------------------
# Attempt lifecycle
# ---------------------------------------------------------------------------


def _get_published_quiz(quiz_id):
    try:
        return Quiz.objects.get(id=quiz_id, is_published=True)
    except Quiz.DoesNotExist:
        raise QuizNotFound()


def list_published_quizzes(course_id):
    return list(Quiz.objects.filter(course_id=course_id, is_published=True).order_by('order_index', 'created_at'))


def get_quiz_questions(quiz_id):
    """Questions of a quiz in presentation order."""
    return list(QuizQuestion.objects.filter(quiz_id=quiz_id).order_by('order_index', 'created_at'))


def get_student_attempts(quiz_id, student):
    """Attempts of one student on one quiz, most recent first."""
    return list(
        QuizAttempt.objects.filter(quiz_id=quiz_id, student=student)
        .select_related('quiz')
        .order_by('-started_at', '-id')
    )


def start_attempt(quiz_id, student, now=None):
    """
    Open a new attempt for the student.
    Raises QuizNotFound for missing or unpublished quizzes and
    AttemptLimitExceeded once max_attempts attempts exist.
    """
    with transaction.atomic():
        quiz = _get_published_quiz(quiz_id)
        used = QuizAttempt.objects.filter(quiz=quiz, student=student).count()
        max_attempts = quiz.effective_max_attempts
        if used >= max_attempts:
            logger.warning(f"Attempt limit reached for student {student.id} on quiz {quiz.id} ({used}/{max_attempts})")
            raise AttemptLimitExceeded(max_attempts)

        attempt = QuizAttempt(
            quiz=quiz,
            student=student,
            started_at=now or timezone.now(),
            answers={},
        )
        attempt.set_deadline()
        attempt.save()

    logger.info(f"Student {student.id} started attempt {attempt.id} on quiz {quiz.id} ({used + 1}/{max_attempts})")
    return attempt


def submit_attempt(quiz_id, attempt_id, answers, student=None, now=None):
    """
    Grade an in-progress attempt and persist the result.

    Questions are loaded at submission time, so max_score reflects the quiz
    as it is now. Submitting a graded attempt raises AlreadySubmitted.
    """
    now = now or timezone.now()
    answers = normalize_answers(answers)

    filters = {'id': attempt_id, 'quiz_id': quiz_id}
    if student is not None:
        filters['student'] = student

    with transaction.atomic():
        try:
            attempt = QuizAttempt.objects.select_related('quiz').get(**filters)
        except QuizAttempt.DoesNotExist:
            raise AttemptNotFound()

        if attempt.is_submitted:
            logger.warning(f"Rejected resubmission of graded attempt {attempt.id}")
            raise AlreadySubmitted()

        deadline = attempt.deadline
        is_late = bool(deadline and now > deadline)
        if is_late and getattr(settings, 'QUIZ_REJECT_LATE_SUBMISSIONS', False):
            logger.warning(f"Rejected late submission of attempt {attempt.id} (deadline {deadline.isoformat()})")
            raise AttemptDeadlinePassed()

        questions = [parse_question(q) for q in get_quiz_questions(quiz_id)]
        result = grade_answers(questions, answers, attempt.quiz.effective_passing_score)

        # Conditional update: only an in-progress attempt may be graded
        updated = QuizAttempt.objects.filter(id=attempt.id, submitted_at__isnull=True).update(
            answers=answers,
            score=result.score,
            max_score=result.max_score,
            passed=result.passed,
            submitted_at=now,
            graded_at=now,
            is_late=is_late,
        )
        if not updated:
            raise AlreadySubmitted()

    attempt.refresh_from_db()
    logger.info(
        f"Graded attempt {attempt.id} on quiz {quiz_id}: {result.score}/{result.max_score} "
        f"({result.percentage}%) passed={result.passed}"
    )
    return attempt


def get_attempt_summary(quiz, student, attempts=None):
    """Counters shown next to a quiz: attempts left, best result, open attempt."""
    if attempts is None:
        attempts = get_student_attempts(quiz.id, student)
    max_attempts = quiz.effective_max_attempts
    graded = [a for a in attempts if a.is_submitted]
    open_attempt = next((a for a in attempts if not a.is_submitted), None)
    return {
        'max_attempts': max_attempts,
        'attempts_used': len(attempts),
        'attempts_remaining': max(0, max_attempts - len(attempts)),
        'best_percentage': max((a.percentage for a in graded), default=None),
        'has_passed': any(a.passed for a in graded),
        'open_attempt_id': open_attempt.id if open_attempt else None,
        'passing_score': quiz.effective_passing_score,
        'time_limit_minutes': quiz.time_limit_minutes,
    }


# ---------------------------------------------------------------------------
# Authoring
# ---------------------------------------------------------------------------


def _clean_quiz(quiz):
    try:
        quiz.full_clean()
    except ValidationError as e:
        raise InvalidQuiz("; ".join(f"{field}: {' '.join(msgs)}" for field, msgs in e.message_dict.items()))


def create_quiz(course, **fields):
    data = {k: v for k, v in fields.items() if k in QUIZ_EDITABLE_FIELDS}
    quiz = Quiz(course=course, **data)
    _clean_quiz(quiz)
    quiz.save()
    logger.info(f"Created quiz {quiz.id} in course {course.id}")
    return quiz


def update_quiz(quiz_id, **fields):
    try:
        quiz = Quiz.objects.get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizNotFound()
    for key, value in fields.items():
        if key in QUIZ_EDITABLE_FIELDS:
            setattr(quiz, key, value)
    _clean_quiz(quiz)
    quiz.save()
    logger.info(f"Updated quiz {quiz.id}")
    return quiz


def validate_question_payload(payload, index=0):
    """
    Check the authoring invariants of one question and return cleaned field
    values. Multiple choice needs at least two options and exactly one
    flagged correct; short answer needs a non-empty expected answer.
    """
    label = f"Question {index + 1}"
    if not isinstance(payload, dict):
        raise InvalidQuestion(f"{label}: must be an object.")

    text = (payload.get('question_text') or '').strip()
    if not text:
        raise InvalidQuestion(f"{label}: question_text is required.")

    question_type = payload.get('question_type', MULTIPLE_CHOICE)
    points = payload.get('points')
    try:
        points = DEFAULT_QUESTION_POINTS if points is None else int(points)
    except (TypeError, ValueError):
        raise InvalidQuestion(f"{label}: points must be a whole number.")
    if points < 1:
        raise InvalidQuestion(f"{label}: points must be at least 1.")

    order_index = payload.get('order_index')
    try:
        order_index = index if order_index is None else int(order_index)
    except (TypeError, ValueError):
        raise InvalidQuestion(f"{label}: order_index must be a whole number.")
    if order_index < 0:
        raise InvalidQuestion(f"{label}: order_index cannot be negative.")

    cleaned = {
        'question_text': text,
        'question_type': question_type,
        'points': points,
        'order_index': order_index,
        'options': [],
        'correct_answer': None,
    }

    if question_type == MULTIPLE_CHOICE:
        options = payload.get('options') or []
        if not isinstance(options, list) or len(options) < 2:
            raise InvalidQuestion(f"{label}: multiple choice needs at least two options.")
        parsed = []
        for opt in options:
            if not isinstance(opt, dict) or not str(opt.get('text', '')).strip():
                raise InvalidQuestion(f"{label}: every option needs text.")
            parsed.append({'text': str(opt['text']), 'is_correct': bool(opt.get('is_correct'))})
        correct_count = sum(1 for opt in parsed if opt['is_correct'])
        if correct_count != 1:
            raise InvalidQuestion(f"{label}: exactly one option must be marked correct (found {correct_count}).")
        cleaned['options'] = parsed
    elif question_type == SHORT_ANSWER:
        answer = str(payload.get('correct_answer') or '').strip()
        if not answer:
            raise InvalidQuestion(f"{label}: short answer needs a correct_answer.")
        cleaned['correct_answer'] = answer
    else:
        raise InvalidQuestion(f"{label}: unsupported question type '{question_type}'.")

    return cleaned


def save_quiz_questions(quiz_id, questions):
    """Replace the question set of a quiz. Nothing is written if any question is invalid."""
    try:
        quiz = Quiz.objects.get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizNotFound()
    if not isinstance(questions, list):
        raise InvalidQuestion("Questions must be a list.")

    cleaned = [validate_question_payload(q, i) for i, q in enumerate(questions)]

    with transaction.atomic():
        QuizQuestion.objects.filter(quiz=quiz).delete()
        QuizQuestion.objects.bulk_create([QuizQuestion(quiz=quiz, **data) for data in cleaned])

    logger.info(f"Saved {len(cleaned)} questions for quiz {quiz.id}")
    return get_quiz_questions(quiz.id)
