"""Leaderboard service functions.

Standings are point totals summed from progress entries. Computed boards are
kept in a ``LeaderboardCache`` for a short time; the cache instance is owned
by the application (``app.extensions['leaderboard_cache']``) or passed in by
the caller.
"""
import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from extensions import db
from models import ProgressEntry, Task, User
from services.exceptions import NotFoundError


OVERALL_KEY = 'overall_leaderboard'
DEFAULT_TTL_SECONDS = 180
DEFAULT_SIZE = 100


def task_key(task_id: int) -> str:
    return f'task_leaderboard_{task_id}'


class LeaderboardCache:
    """In-memory key/value store whose entries expire after ``ttl_seconds``."""

    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS,
                 clock: Optional[Callable[[], datetime]] = None):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock or datetime.utcnow
        self._entries: Dict[str, tuple] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            cached = self._entries.get(key)
            if cached is None:
                return None
            value, expires_at = cached
            if self.clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (value, self.clock() + self.ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def get_leaderboard_cache() -> LeaderboardCache:
    """The cache registered on the current application."""
    return current_app.extensions['leaderboard_cache']


def _board_size() -> int:
    return current_app.config.get('LEADERBOARD_SIZE', DEFAULT_SIZE)


def get_overall_leaderboard(cache: Optional[LeaderboardCache] = None) -> List[Dict]:
    """Users ranked by total points across every task, highest first."""
    if cache is None:
        cache = get_leaderboard_cache()
    board = cache.get(OVERALL_KEY)
    if board is not None:
        return board

    total_points = func.sum(ProgressEntry.points_earned).label('total_points')
    rows = (db.session.query(User.id, User.username, total_points)
            .join(ProgressEntry, ProgressEntry.user_id == User.id)
            .group_by(User.id, User.username)
            .order_by(total_points.desc(), User.id)
            .limit(_board_size())
            .all())

    board = [{
        'rank': index + 1,
        'user_id': row.id,
        'username': row.username,
        'total_points': int(row.total_points or 0),
    } for index, row in enumerate(rows)]
    cache.set(OVERALL_KEY, board)
    return board


def get_task_leaderboard(task_id: int, cache: Optional[LeaderboardCache] = None) -> List[Dict]:
    """Users ranked by points earned on one task, with the total value logged."""
    if cache is None:
        cache = get_leaderboard_cache()
    key = task_key(task_id)
    board = cache.get(key)
    if board is not None:
        return board

    if db.session.get(Task, task_id) is None:
        raise NotFoundError('Task not found', code='TASK_NOT_FOUND')

    total_points = func.sum(ProgressEntry.points_earned).label('total_points')
    total_value = func.sum(ProgressEntry.value).label('total_value')
    rows = (db.session.query(User.id, User.username, total_points, total_value)
            .join(ProgressEntry, ProgressEntry.user_id == User.id)
            .filter(ProgressEntry.task_id == task_id)
            .group_by(User.id, User.username)
            .order_by(total_points.desc(), User.id)
            .limit(_board_size())
            .all())

    board = [{
        'rank': index + 1,
        'user_id': row.id,
        'username': row.username,
        'total_points': int(row.total_points or 0),
        'total_value': float(Decimal(str(row.total_value or 0))),
    } for index, row in enumerate(rows)]
    cache.set(key, board)
    return board


def invalidate_leaderboard(task_id: Optional[int] = None, cache: Optional[LeaderboardCache] = None) -> None:
    """Drop the overall board and, when given, the board of ``task_id``."""
    if cache is None:
        cache = get_leaderboard_cache()
    cache.delete(OVERALL_KEY)
    if task_id is not None:
        cache.delete(task_key(task_id))
