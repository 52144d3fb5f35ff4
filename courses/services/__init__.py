# courses/services/__init__.py
from . import (
    access_service,
    enrollment_service,
    pagination,
    progress_service,
    quiz_service,
    schedule_service,
)

__all__ = [
    'access_service',
    'enrollment_service',
    'pagination',
    'progress_service',
    'quiz_service',
    'schedule_service',
]
