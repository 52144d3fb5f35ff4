# courses/admin.py
from django.contrib import admin
from .models import (
    Course, CourseContent, Enrollment, ContentProgress,
    Quiz, QuizQuestion, QuizAttempt, ContentScheduleRule,
)


# ================================
# INLINES
# ================================

class CourseContentInline(admin.TabularInline):
    model = CourseContent
    extra = 0
    fields = ("title", "content_type", "order_index", "is_free")
    ordering = ("order_index",)


class QuizQuestionInline(admin.TabularInline):
    model = QuizQuestion
    extra = 1
    fields = ("question_text", "question_type", "options", "correct_answer", "points", "order_index")
    ordering = ("order_index",)


class ContentProgressInline(admin.TabularInline):
    model = ContentProgress
    extra = 0
    readonly_fields = ("progress_percentage", "completed", "completed_at",
                       "first_accessed", "last_accessed")


# ================================
# COURSE
# ================================

@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "instructor", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("title", "description", "slug")
    prepopulated_fields = {"slug": ("title",)}
    ordering = ("-created_at",)
    inlines = [CourseContentInline]


@admin.register(CourseContent)
class CourseContentAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "content_type", "order_index", "created_at")
    list_filter = ("course", "content_type")
    search_fields = ("title", "description")
    ordering = ("course", "order_index")


@admin.register(ContentScheduleRule)
class ContentScheduleRuleAdmin(admin.ModelAdmin):
    list_display = ("content", "course", "unlock_after_days", "unlock_after_content", "created_at")
    list_filter = ("course",)
    search_fields = ("content__title",)


# ================================
# ENROLLMENT & PROGRESS
# ================================

@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "progress_percentage", "enrolled_at", "completed_at")
    list_filter = ("course", "enrolled_at")
    search_fields = ("student__email", "course__title")
    readonly_fields = ("enrolled_at",)
    inlines = [ContentProgressInline]


# ================================
# QUIZZES
# ================================

@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "course", "passing_score", "max_attempts",
                    "time_limit_minutes", "is_published")
    list_filter = ("is_published", "course")
    search_fields = ("title", "description")
    inlines = [QuizQuestionInline]


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ("id", "quiz", "student", "score", "max_score", "passed",
                    "is_late", "started_at", "submitted_at")
    list_filter = ("passed", "is_late", "quiz")
    search_fields = ("student__email", "quiz__title")
    readonly_fields = ("started_at", "expires_at", "submitted_at", "graded_at", "answers")
