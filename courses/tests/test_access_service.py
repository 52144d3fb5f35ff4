from datetime import timedelta

import pytest

from courses.exceptions import NotEnrolled
from courses.models import ContentProgress, ContentScheduleRule, CourseContent
from courses.services import access_service
from courses.services.access_service import evaluate_content_access, format_time_until_unlock


@pytest.fixture
def contents(course):
    return [
        CourseContent.objects.create(course=course, title=f"Lesson {i}", content_type="video", order_index=i)
        for i in range(3)
    ]


def _by_id(items):
    return {item.content_id: item for item in items}


@pytest.mark.django_db
def test_item_without_rule_is_unlocked_from_enrollment(student, enrollment, contents, t0):
    items = access_service.get_unlocked_content(student, enrollment.course_id, now=t0)
    assert all(item.is_unlocked for item in items)
    assert [item.order_index for item in items] == [0, 1, 2]


@pytest.mark.django_db
def test_time_rule_unlocks_exactly_at_boundary(student, course, enrollment, contents, t0):
    target = contents[1]
    ContentScheduleRule.objects.create(course=course, content=target, unlock_after_days=7)

    before = _by_id(access_service.get_unlocked_content(student, course.id, now=t0 + timedelta(days=7, seconds=-1)))
    at = _by_id(access_service.get_unlocked_content(student, course.id, now=t0 + timedelta(days=7)))

    assert before[target.id].is_unlocked is False
    assert before[target.id].unlock_date == t0 + timedelta(days=7)
    assert at[target.id].is_unlocked is True


@pytest.mark.django_db
def test_two_day_rule_locked_then_unlocked(student, course, enrollment, contents, t0):
    target = contents[2]
    ContentScheduleRule.objects.create(course=course, content=target, unlock_after_days=2)

    day_one = _by_id(access_service.get_unlocked_content(student, course.id, now=t0 + timedelta(days=1)))
    later = _by_id(access_service.get_unlocked_content(student, course.id, now=t0 + timedelta(days=2, minutes=1)))

    assert day_one[target.id].is_unlocked is False
    assert day_one[target.id].unlock_date == t0 + timedelta(days=2)
    assert later[target.id].is_unlocked is True


@pytest.mark.django_db
def test_prerequisite_rule_waits_for_completion(student, course, enrollment, contents, t0):
    first, second = contents[0], contents[1]
    ContentScheduleRule.objects.create(course=course, content=second, unlock_after_content=first)

    far_future = t0 + timedelta(days=365)
    assert _by_id(access_service.get_unlocked_content(student, course.id, now=far_future))[second.id].is_unlocked is False

    ContentProgress.objects.create(enrollment=enrollment, content=first).mark_completed(completed_at=t0)

    items = _by_id(access_service.get_unlocked_content(student, course.id, now=t0))
    assert items[second.id].is_unlocked is True
    assert items[second.id].unlock_date is None


@pytest.mark.django_db
def test_unlocked_content_requires_enrollment(student, course, contents):
    with pytest.raises(NotEnrolled):
        access_service.get_unlocked_content(student, course.id)


@pytest.mark.django_db
def test_is_content_unlocked_for_single_item(student, other_student, course, enrollment, contents, t0):
    target = contents[1]
    ContentScheduleRule.objects.create(course=course, content=target, unlock_after_days=3)

    assert access_service.is_content_unlocked(student, contents[0], now=t0) is True
    assert access_service.is_content_unlocked(student, target, now=t0) is False
    assert access_service.is_content_unlocked(student, target, now=t0 + timedelta(days=3)) is True
    assert access_service.is_content_unlocked(other_student, contents[0], now=t0) is False


class _Item:
    def __init__(self, id, order_index, title="Item", content_type="text"):
        self.id = id
        self.order_index = order_index
        self.title = title
        self.content_type = content_type


class _Rule:
    def __init__(self, unlock_after_days=None, unlock_after_content_id=None):
        self.unlock_after_days = unlock_after_days
        self.unlock_after_content_id = unlock_after_content_id


def test_days_take_precedence_over_prerequisite(t0):
    items = [_Item(1, 0), _Item(2, 1)]
    rules = {2: _Rule(unlock_after_days=5, unlock_after_content_id=1)}

    result = _by_id(evaluate_content_access(items, rules, t0, {1}, t0 + timedelta(days=1)))

    assert result[2].is_unlocked is False
    assert result[2].unlock_date == t0 + timedelta(days=5)


def test_zero_days_falls_back_to_prerequisite(t0):
    items = [_Item(1, 0), _Item(2, 1)]
    rules = {2: _Rule(unlock_after_days=0, unlock_after_content_id=1)}

    assert _by_id(evaluate_content_access(items, rules, t0, set(), t0))[2].is_unlocked is False
    assert _by_id(evaluate_content_access(items, rules, t0, {1}, t0))[2].is_unlocked is True


def test_empty_rule_gates_nothing(t0):
    result = evaluate_content_access([_Item(1, 0)], {1: _Rule()}, t0, set(), t0)
    assert result[0].is_unlocked is True


def test_items_sorted_by_order_index(t0):
    items = [_Item(3, 2), _Item(1, 0), _Item(2, 1)]
    result = evaluate_content_access(items, {}, t0, set(), t0)
    assert [item.content_id for item in result] == [1, 2, 3]


@pytest.mark.parametrize("remaining, expected", [
    (timedelta(days=2, hours=5, minutes=10), "2d 5h"),
    (timedelta(hours=3, minutes=20), "3h 20m"),
    (timedelta(minutes=45, seconds=30), "45m"),
    (timedelta(0), "Available now"),
    (timedelta(minutes=-5), "Available now"),
])
def test_format_time_until_unlock(t0, remaining, expected):
    assert format_time_until_unlock(t0 + remaining, now=t0) == expected


def test_format_time_until_unlock_without_date():
    assert format_time_until_unlock(None) is None
