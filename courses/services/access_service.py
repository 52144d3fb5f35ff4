import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.utils import timezone

from ..constants import AVAILABLE_NOW
from ..exceptions import NotEnrolled
from ..models import ContentScheduleRule, CourseContent, Enrollment

logger = logging.getLogger(__name__)


@dataclass
class ContentAccess:
    content_id: int
    title: str
    content_type: str
    order_index: int
    is_unlocked: bool
    unlock_date: Optional[datetime]


def evaluate_rule(rule, enrolled_at, completed_ids, now):
    """
    Returns (is_unlocked, unlock_date) for a single content item.

    A positive day count wins over a prerequisite when a rule carries both.
    A rule with neither a positive day count nor a prerequisite gates nothing.
    """
    if rule is None:
        return True, None
    if rule.unlock_after_days and rule.unlock_after_days > 0:
        unlock_date = enrolled_at + timedelta(days=rule.unlock_after_days)
        return now >= unlock_date, unlock_date
    if rule.unlock_after_content_id is not None:
        return rule.unlock_after_content_id in completed_ids, None
    return True, None


def evaluate_content_access(contents, rules, enrolled_at, completed_ids, now):
    """
    Pure evaluation of content visibility for one student.

    contents: content items (anything with id, title, content_type, order_index)
    rules: mapping content_id -> schedule rule
    completed_ids: ids of content items the student has completed
    """
    completed_ids = set(completed_ids)
    result = []
    for content in sorted(contents, key=lambda c: (c.order_index, c.id)):
        is_unlocked, unlock_date = evaluate_rule(rules.get(content.id), enrolled_at, completed_ids, now)
        result.append(ContentAccess(
            content_id=content.id,
            title=content.title,
            content_type=content.content_type,
            order_index=content.order_index,
            is_unlocked=is_unlocked,
            unlock_date=unlock_date,
        ))
    return result


def get_enrollment(student, course_id):
    try:
        return Enrollment.objects.get(student=student, course_id=course_id)
    except Enrollment.DoesNotExist:
        raise NotEnrolled()


def get_unlocked_content(student, course_id, now=None):
    """
    Content list of a course annotated with lock state for this student,
    ordered by order_index. Evaluated fresh on every call.
    """
    now = now or timezone.now()
    enrollment = get_enrollment(student, course_id)

    contents = CourseContent.objects.filter(course_id=course_id).order_by('order_index', 'id')
    rules = {rule.content_id: rule for rule in ContentScheduleRule.objects.filter(course_id=course_id)}
    completed_ids = enrollment.completed_content_ids()

    items = evaluate_content_access(contents, rules, enrollment.enrolled_at, completed_ids, now)
    logger.debug(
        f"Evaluated {len(items)} content items for student {student.id} in course {course_id}: "
        f"{sum(1 for i in items if i.is_unlocked)} unlocked"
    )
    return items


def is_content_unlocked(student, content, now=None):
    """Single-item variant of get_unlocked_content."""
    now = now or timezone.now()
    try:
        enrollment = Enrollment.objects.get(student=student, course_id=content.course_id)
    except Enrollment.DoesNotExist:
        return False

    rule = ContentScheduleRule.objects.filter(content=content).first()
    if rule is None:
        return True
    is_unlocked, _ = evaluate_rule(rule, enrollment.enrolled_at, enrollment.completed_content_ids(), now)
    return is_unlocked


def format_time_until_unlock(unlock_date, now=None):
    """
    Remaining time until unlock_date as '2d 5h', '3h 20m' or '45m';
    'Available now' once the date has passed.
    """
    if unlock_date is None:
        return None
    now = now or timezone.now()
    remaining = unlock_date - now
    if remaining <= timedelta(0):
        return AVAILABLE_NOW

    total_minutes = int(remaining.total_seconds() // 60)
    days, rest = divmod(total_minutes, 60 * 24)
    hours, minutes = divmod(rest, 60)
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
