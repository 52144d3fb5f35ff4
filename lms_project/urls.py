from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, re_path, include
from rest_framework_simplejwt.views import TokenRefreshView

from user_managment.views import MyTokenObtainPairView, TokenCheckView, UserView
from courses.views import (
    enroll_in_course_view,
    get_course_progress_view,
    # Content & drip schedule
    get_course_content_view,
    mark_content_completed_view,
    content_schedules_view,
    remove_content_schedule_view,
    # Quiz endpoints
    list_course_quizzes_view,
    create_quiz_view,
    update_quiz_view,
    save_quiz_questions_view,
    get_quiz_questions_view,
    start_quiz_attempt_view,
    submit_quiz_view,
    get_quiz_attempt_history_view,
)


urlpatterns = [
    path('api/admin/', admin.site.urls),
    re_path(r'^api/token/?$', MyTokenObtainPairView.as_view(), name='token_obtain_pair'),
    re_path(r'^api/token/refresh/?$', TokenRefreshView.as_view(), name='token_refresh'),
    re_path(r'^api/token/check/?$', TokenCheckView.as_view(), name='token_check'),
    re_path(r'^api/me/?$', UserView.as_view(), name='get_profile'),

    # Enrollment & progress
    re_path(r'^api/courses/(?P<course_id>\d+)/enroll/$', enroll_in_course_view, name='enroll_course'),
    re_path(r'^api/courses/(?P<course_id>\d+)/progress/$', get_course_progress_view, name='course_progress'),

    # Content & drip schedule
    re_path(r'^api/courses/(?P<course_id>\d+)/content/$', get_course_content_view, name='course_content'),
    re_path(r'^api/content/(?P<content_id>\d+)/complete/$', mark_content_completed_view, name='mark_content_completed'),
    re_path(r'^api/courses/(?P<course_id>\d+)/schedules/$', content_schedules_view, name='content_schedules'),
    re_path(r'^api/schedules/(?P<rule_id>\d+)/$', remove_content_schedule_view, name='remove_content_schedule'),

    # Quiz endpoints - Teachers
    re_path(r'^api/courses/(?P<course_id>\d+)/quizzes/create/$', create_quiz_view, name='create_quiz'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/$', update_quiz_view, name='update_quiz'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/questions/save/$', save_quiz_questions_view, name='save_quiz_questions'),

    # Quiz endpoints - Students
    re_path(r'^api/courses/(?P<course_id>\d+)/quizzes/$', list_course_quizzes_view, name='course_quizzes'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/questions/$', get_quiz_questions_view, name='get_quiz_questions'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/start/$', start_quiz_attempt_view, name='start_quiz_attempt'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/attempts/(?P<attempt_id>\d+)/submit/$', submit_quiz_view, name='submit_quiz'),
    re_path(r'^api/quizzes/(?P<quiz_id>\d+)/attempts/$', get_quiz_attempt_history_view, name='quiz_attempt_history'),

    # Grading
    path('api/grading/', include('grading.urls')),
]
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
