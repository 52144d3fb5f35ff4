import logging

from django.db import IntegrityError, transaction

from ..constants import IMMEDIATE_ACCESS
from ..exceptions import ContentNotFound, InvalidSchedule, ScheduleNotFound
from ..models import ContentScheduleRule, CourseContent

logger = logging.getLogger(__name__)


def list_content_schedules(course_id):
    """Schedule rules of a course with the titles the drip manager displays."""
    rules = (
        ContentScheduleRule.objects.filter(course_id=course_id)
        .select_related('content', 'unlock_after_content')
        .order_by('content__order_index', 'id')
    )
    return [
        {
            'id': rule.id,
            'content_id': rule.content_id,
            'content_title': rule.content.title,
            'unlock_after_days': rule.unlock_after_days,
            'unlock_after_content_id': rule.unlock_after_content_id,
            'unlock_after_content_title': rule.unlock_after_content.title if rule.unlock_after_content else None,
            'status': describe_schedule(rule),
            'created_at': rule.created_at,
        }
        for rule in rules
    ]


def describe_schedule(rule):
    if rule is None:
        return IMMEDIATE_ACCESS
    if rule.is_time_based:
        return f"{rule.unlock_after_days} days"
    if rule.is_prerequisite_based:
        return "after content"
    return "scheduled"


def add_content_schedule(course, content_id, unlock_after_days=None, unlock_after_content_id=None):
    """
    Attach a schedule rule to a content item of the course.
    One rule per item; the prerequisite must be another item of the same course.
    """
    try:
        content_id = int(content_id)
    except (TypeError, ValueError):
        raise InvalidSchedule("content_id must be a content item id.")
    try:
        content = CourseContent.objects.get(id=content_id, course=course)
    except CourseContent.DoesNotExist:
        raise ContentNotFound("Content item not found in this course.")

    if unlock_after_days is not None:
        try:
            unlock_after_days = int(unlock_after_days)
        except (TypeError, ValueError):
            raise InvalidSchedule("unlock_after_days must be a whole number.")
        if unlock_after_days < 0:
            raise InvalidSchedule("unlock_after_days cannot be negative.")

    prerequisite = None
    if unlock_after_content_id:
        try:
            unlock_after_content_id = int(unlock_after_content_id)
        except (TypeError, ValueError):
            raise InvalidSchedule("unlock_after_content_id must be a content item id.")
        if unlock_after_content_id == content.id:
            raise InvalidSchedule("A content item cannot be its own prerequisite.")
        try:
            prerequisite = CourseContent.objects.get(id=unlock_after_content_id, course=course)
        except CourseContent.DoesNotExist:
            raise InvalidSchedule("Prerequisite content must belong to the same course.")

    if unlock_after_days is None and prerequisite is None:
        raise InvalidSchedule("Provide unlock_after_days or unlock_after_content_id.")

    if ContentScheduleRule.objects.filter(content=content).exists():
        raise InvalidSchedule("This content item already has a schedule. Remove it first.")

    try:
        with transaction.atomic():
            rule = ContentScheduleRule.objects.create(
                course=course,
                content=content,
                unlock_after_days=unlock_after_days,
                unlock_after_content=prerequisite,
            )
    except IntegrityError:
        raise InvalidSchedule("This content item already has a schedule. Remove it first.")

    logger.info(
        f"Added schedule {rule.id} for content {content.id} in course {course.id} "
        f"(days={unlock_after_days}, after={prerequisite.id if prerequisite else None})"
    )
    return rule


def get_content_schedule(rule_id):
    try:
        return ContentScheduleRule.objects.get(id=rule_id)
    except ContentScheduleRule.DoesNotExist:
        raise ScheduleNotFound()


def remove_content_schedule(rule_id, course=None):
    filters = {'id': rule_id}
    if course is not None:
        filters['course'] = course
    try:
        rule = ContentScheduleRule.objects.get(**filters)
    except ContentScheduleRule.DoesNotExist:
        raise ScheduleNotFound()
    content_id = rule.content_id
    rule.delete()
    logger.info(f"Removed schedule {rule_id} for content {content_id}")
    return True
