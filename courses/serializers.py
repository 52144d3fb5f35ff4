from rest_framework import serializers

from courses.models import (
    ContentScheduleRule,
    Enrollment,
    Quiz,
    QuizAttempt,
    QuizQuestion,
)
from courses.services.access_service import format_time_until_unlock


class EnrollmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Enrollment
        fields = ["id", "student", "course", "enrolled_at", "progress_percentage", "completed_at"]


class QuizSerializer(serializers.ModelSerializer):
    question_count = serializers.SerializerMethodField()
    total_points = serializers.IntegerField(read_only=True)

    class Meta:
        model = Quiz
        fields = [
            "id", "course", "title", "description", "passing_score", "max_attempts",
            "time_limit_minutes", "is_published", "order_index", "question_count",
            "total_points", "created_at", "updated_at",
        ]
        read_only_fields = ["course", "created_at", "updated_at"]

    def get_question_count(self, obj):
        return obj.questions.count()


class QuizQuestionSerializer(serializers.ModelSerializer):
    """Full question including the expected answers (instructor view)."""

    class Meta:
        model = QuizQuestion
        fields = [
            "id", "quiz", "question_text", "question_type", "options",
            "correct_answer", "points", "order_index",
        ]


class StudentQuizQuestionSerializer(serializers.ModelSerializer):
    """Question as shown while taking a quiz: no correctness flags, no expected answer."""
    options = serializers.SerializerMethodField()

    class Meta:
        model = QuizQuestion
        fields = ["id", "question_text", "question_type", "options", "points", "order_index"]

    def get_options(self, obj):
        return [
            {"text": opt.get("text", "")}
            for opt in (obj.options or [])
            if isinstance(opt, dict)
        ]


class QuizAttemptSerializer(serializers.ModelSerializer):
    state = serializers.SerializerMethodField()
    percentage = serializers.FloatField(read_only=True)
    deadline = serializers.DateTimeField(read_only=True)

    class Meta:
        model = QuizAttempt
        fields = [
            "id", "quiz", "student", "state", "started_at", "deadline", "submitted_at",
            "answers", "score", "max_score", "percentage", "passed", "graded_at", "is_late",
        ]

    def get_state(self, obj):
        return obj.state.value


class ContentAccessSerializer(serializers.Serializer):
    content_id = serializers.IntegerField()
    title = serializers.CharField()
    content_type = serializers.CharField()
    order_index = serializers.IntegerField()
    is_unlocked = serializers.BooleanField()
    unlock_date = serializers.DateTimeField(allow_null=True)
    time_until_unlock = serializers.SerializerMethodField()

    def get_time_until_unlock(self, obj):
        if obj.is_unlocked:
            return None
        return format_time_until_unlock(obj.unlock_date, now=self.context.get("now"))


class ContentScheduleRuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContentScheduleRule
        fields = ["id", "course", "content", "unlock_after_days", "unlock_after_content", "created_at"]
