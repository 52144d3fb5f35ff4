# models.py
"""
Domain models for the courses application.

The file is organised in thematic sections to make it easier to navigate.
A quick overview of the section order:

1.  Course catalog (courses and their content items)
2.  Enrollment and progress tracking
3.  Quizzes (definition, questions, attempts)
4.  Drip content scheduling
"""

import enum
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.text import slugify

from user_managment.models import User
from .choices import CONTENT_TYPE_CHOICES, QUESTION_TYPE_CHOICES, STATUS_CHOICES
from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_PASSING_SCORE, DEFAULT_QUESTION_POINTS

# ---------------------------------------------------------------------------
# Course Catalog
# ---------------------------------------------------------------------------


class Course(models.Model):
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, null=True, blank=True)
    description = models.TextField(blank=True)
    instructor = models.ForeignKey(User, on_delete=models.CASCADE, related_name="courses")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="draft")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Courses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="courses_cou_status_5d3a1c_idx"),
            models.Index(fields=["instructor", "created_at"], name="courses_cou_instruc_8b2e4f_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.title)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.title

    @property
    def is_visible(self):
        return self.status == "published"


class CourseContent(models.Model):
    """A single consumable item of a course (video, document, text...)."""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="contents")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    content_type = models.CharField(max_length=20, choices=CONTENT_TYPE_CHOICES, default="video")
    content_url = models.URLField(max_length=500, blank=True)
    text_content = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    is_free = models.BooleanField(default=False)
    order_index = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Course Content"
        ordering = ["order_index", "created_at"]
        indexes = [
            models.Index(fields=["course", "order_index"], name="courses_cou_course__a41c7e_idx"),
        ]

    def __str__(self):
        return f"{self.id}: {self.course.title} - {self.title} ({self.get_content_type_display()})"


# ---------------------------------------------------------------------------
# Enrollment & Progress
# ---------------------------------------------------------------------------


class Enrollment(models.Model):
    student = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name='enrollments', db_index=True
    )
    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, related_name='enrollments', db_index=True
    )
    # Drip schedules are measured from this instant
    enrolled_at = models.DateTimeField(default=timezone.now)
    progress_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0.00)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        unique_together = ['student', 'course']
        ordering = ['-enrolled_at']
        indexes = [
            models.Index(fields=['student', 'course'], name='courses_enr_student_3f9d21_idx'),
        ]
        verbose_name_plural = "Enrollment"

    def calculate_progress(self):
        """Recalculate course progress from completed content items."""
        total = CourseContent.objects.filter(course=self.course).count()
        if total == 0:
            self.progress_percentage = 0
            self.completed_at = None
        else:
            completed = ContentProgress.objects.filter(enrollment=self, completed=True).count()
            self.progress_percentage = round((completed / total) * 100, 2)
            if completed == total:
                if not self.completed_at:
                    self.completed_at = timezone.now()
            else:
                self.completed_at = None
        self.save(update_fields=['progress_percentage', 'completed_at'])
        return self.progress_percentage

    def completed_content_ids(self):
        return set(
            ContentProgress.objects.filter(enrollment=self, completed=True).values_list('content_id', flat=True)
        )

    def __str__(self):
        return f"{self.student.email} - {self.course.title}"


class ContentProgress(models.Model):
    """Per-student progress on a content item. A completed row is a completion record."""
    enrollment = models.ForeignKey(
        Enrollment, on_delete=models.CASCADE, related_name='content_progress', db_index=True
    )
    content = models.ForeignKey(
        CourseContent, on_delete=models.CASCADE, related_name='student_progress', db_index=True
    )
    progress_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0.00)
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    time_spent_seconds = models.PositiveIntegerField(default=0)
    first_accessed = models.DateTimeField(auto_now_add=True)
    last_accessed = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ['enrollment', 'content']
        ordering = ['content__order_index']
        verbose_name_plural = "Content Progress"

    def mark_completed(self, completed_at=None):
        self.progress_percentage = 100
        self.completed = True
        if not self.completed_at:
            self.completed_at = completed_at or timezone.now()
        self.save(update_fields=['progress_percentage', 'completed', 'completed_at', 'last_accessed'])

        # Cascade update to enrollment
        self.enrollment.calculate_progress()
        return self

    def __str__(self):
        return f"{self.enrollment.student.email} - {self.content.title} - {self.progress_percentage}%"


# ---------------------------------------------------------------------------
# Quizzes
# ---------------------------------------------------------------------------


class Quiz(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="quizzes")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    passing_score = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=DEFAULT_PASSING_SCORE,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Minimum percentage required to pass (0-100)"
    )
    max_attempts = models.PositiveIntegerField(
        null=True,
        blank=True,
        default=DEFAULT_MAX_ATTEMPTS,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of attempts allowed"
    )
    time_limit_minutes = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Advisory time limit in minutes. Leave empty for no limit."
    )
    is_published = models.BooleanField(default=False)
    order_index = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Quizzes"
        ordering = ["order_index", "created_at"]
        indexes = [
            models.Index(fields=["course", "is_published"], name="courses_qui_course__6e0b5a_idx"),
        ]

    def __str__(self):
        return f"Quiz - {self.title}"

    @property
    def effective_passing_score(self):
        if self.passing_score is None:
            return getattr(settings, "QUIZ_DEFAULT_PASSING_SCORE", DEFAULT_PASSING_SCORE)
        return self.passing_score

    @property
    def effective_max_attempts(self):
        if self.max_attempts is None:
            return getattr(settings, "QUIZ_DEFAULT_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
        return self.max_attempts

    @property
    def total_points(self):
        return sum(q.points for q in self.questions.all())


class QuizQuestion(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='questions')
    question_text = models.TextField()
    question_type = models.CharField(max_length=30, choices=QUESTION_TYPE_CHOICES, default='multiple_choice')
    options = models.JSONField(
        default=list,
        blank=True,
        help_text="Multiple choice only: [{'text': 'Paris', 'is_correct': true}, ...]"
    )
    correct_answer = models.TextField(
        null=True,
        blank=True,
        help_text="Short answer only: expected answer, compared case-insensitively"
    )
    points = models.PositiveIntegerField(
        default=DEFAULT_QUESTION_POINTS,
        validators=[MinValueValidator(1)],
        help_text="Points the question carries"
    )
    order_index = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['order_index', 'created_at']
        verbose_name_plural = "QuizQuestion"

    def __str__(self):
        return f"{self.quiz.title} - Question {self.order_index + 1}"


class AttemptState(enum.Enum):
    IN_PROGRESS = "in_progress"
    GRADED = "graded"


class QuizAttempt(models.Model):
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='attempts')
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='quiz_attempts')
    started_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True)  # null when the quiz has no time limit
    submitted_at = models.DateTimeField(null=True, blank=True)  # null while in progress
    answers = models.JSONField(default=dict, blank=True)  # {question_id: answer text}
    score = models.PositiveIntegerField(null=True, blank=True)
    max_score = models.PositiveIntegerField(null=True, blank=True)
    passed = models.BooleanField(null=True, blank=True)
    graded_at = models.DateTimeField(null=True, blank=True)
    is_late = models.BooleanField(default=False)

    class Meta:
        ordering = ['-started_at', '-id']
        verbose_name_plural = "QuizAttempt"
        indexes = [
            models.Index(fields=['quiz', 'student', '-started_at'], name='courses_qui_quiz_id_92c7d3_idx'),
        ]

    @property
    def state(self):
        return AttemptState.IN_PROGRESS if self.submitted_at is None else AttemptState.GRADED

    @property
    def is_submitted(self):
        return self.state is AttemptState.GRADED

    @property
    def percentage(self):
        if not self.is_submitted:
            return None
        if not self.max_score:
            return 0.0
        return round(self.score / self.max_score * 100, 1)

    @property
    def deadline(self):
        return self.expires_at

    def set_deadline(self):
        """Fix the deadline from the quiz time limit in force when the attempt starts."""
        limit = self.quiz.time_limit_minutes
        self.expires_at = self.started_at + timedelta(minutes=limit) if limit else None

    def __str__(self):
        return f"{self.student.email} - {self.quiz.title} - {self.score}/{self.max_score}"


# ---------------------------------------------------------------------------
# Drip Content Scheduling
# ---------------------------------------------------------------------------


class ContentScheduleRule(models.Model):
    """
    Gates a content item behind elapsed time since enrollment or the
    completion of a prerequisite item. Items without a rule are open.
    """
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="content_schedules")
    content = models.OneToOneField(CourseContent, on_delete=models.CASCADE, related_name="schedule_rule")
    unlock_after_days = models.PositiveIntegerField(null=True, blank=True)
    unlock_after_content = models.ForeignKey(
        CourseContent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="dependent_schedules"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["content__order_index"]
        verbose_name_plural = "Content Schedule Rules"

    def clean(self):
        super().clean()
        if self.content_id and self.course_id and self.content.course_id != self.course_id:
            raise ValidationError({'content': 'Content item belongs to another course.'})
        if self.unlock_after_content_id:
            if self.unlock_after_content_id == self.content_id:
                raise ValidationError({'unlock_after_content': 'A content item cannot be its own prerequisite.'})
            if self.unlock_after_content.course_id != self.course_id:
                raise ValidationError({'unlock_after_content': 'Prerequisite belongs to another course.'})

    @property
    def is_time_based(self):
        return bool(self.unlock_after_days and self.unlock_after_days > 0)

    @property
    def is_prerequisite_based(self):
        return self.unlock_after_content_id is not None

    def __str__(self):
        return f"Schedule - {self.content.title}"
