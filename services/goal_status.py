"""Goal status calculation.

Pure functions that turn a day's current value into a goal status and a
completion rate. Nothing here touches the database, so the tracker, the
completion detector and the tests all share the exact same rules.
"""
import math
from datetime import datetime
from typing import NamedTuple, Optional

from models.goal_definition import GoalStatus, TargetType


class GoalStatusResult(NamedTuple):
    status: GoalStatus
    completion_rate: int
    completed_at: Optional[datetime]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def percentage(part, whole) -> int:
    """Rounded ``part / whole`` as a percentage, 0 when ``whole`` is not positive."""
    whole = float(whole)
    if whole <= 0:
        return 0
    return round_half_up(float(part) / whole * 100)


def calculate_goal_status(current_value,
                          target_value,
                          target_type: TargetType,
                          existing_completed_at: Optional[datetime] = None,
                          now: Optional[datetime] = None) -> GoalStatusResult:
    """
    Derive status, completion rate and completion time for a goal.

    Args:
        current_value: Sum of the day's progress (>= 0)
        target_value: Target snapshotted on the progress row
        target_type: EXACT, MINIMUM or MAXIMUM
        existing_completed_at: Completion time already stored, never replaced
        now: Override for the completion timestamp

    Returns:
        GoalStatusResult(status, completion_rate, completed_at)
    """
    target_type = TargetType(target_type)
    completed_at = existing_completed_at

    if current_value == 0:
        return GoalStatusResult(GoalStatus.NOT_STARTED, 0, completed_at)

    if target_type == TargetType.MAXIMUM:
        if current_value <= target_value:
            completion_rate = 100
            status = GoalStatus.COMPLETED
        else:
            target = float(target_value)
            overshoot = (float(current_value) - target) / target * 100 if target > 0 else 100
            completion_rate = max(0, round_half_up(100 - overshoot))
            status = GoalStatus.EXCEEDED
    else:
        completion_rate = percentage(current_value, target_value)
        if current_value == target_value:
            status = GoalStatus.COMPLETED
        elif current_value > target_value:
            status = GoalStatus.EXCEEDED
        else:
            status = GoalStatus.IN_PROGRESS

    reached_now = status == GoalStatus.COMPLETED or (
        status == GoalStatus.EXCEEDED and target_type != TargetType.MAXIMUM
    )
    if reached_now and completed_at is None:
        completed_at = now or datetime.utcnow()

    return GoalStatusResult(status, completion_rate, completed_at)


def goal_outcome(status: GoalStatus, target_type: TargetType) -> str:
    """
    Display label that separates the two meanings of EXCEEDED.

    EXACT and MINIMUM goals that are EXCEEDED were over-achieved; a MAXIMUM
    goal that is EXCEEDED went over its limit.
    """
    status = GoalStatus(status)
    if status == GoalStatus.EXCEEDED:
        if TargetType(target_type) == TargetType.MAXIMUM:
            return 'over_limit'
        return 'over_achieved'
    return status.value.lower()
