from flask import Blueprint, request, current_app, jsonify, session
from datetime import datetime
from routes.auth import login_required
from services import (
    check_goal_completion,
    get_daily_goals_for_user,
    get_goal_history,
    update_user_timezone,
)
from services.exceptions import InvalidArgumentError

goals_bp = Blueprint('goals', __name__)


def parse_date_param(value, field_name='date'):
    """Parse a YYYY-MM-DD query value; None when absent."""
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidArgumentError(f'Invalid {field_name} format. Use YYYY-MM-DD format.', code='INVALID_DATE')


def parse_int_param(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@goals_bp.route('/daily', methods=['GET'])
@login_required
def daily_goals():
    """Current daily goals with progress for the logged in user"""
    goal_date = parse_date_param(request.args.get('date'))
    timezone = request.args.get('timezone') or None

    result = get_daily_goals_for_user(session['user_id'], goal_date, timezone)
    return jsonify({'success': True, 'data': result})


@goals_bp.route('/history', methods=['GET'])
@login_required
def goal_history():
    """Archived goal results with pagination, completion summary and streaks"""
    start_date = parse_date_param(request.args.get('startDate'), 'start date')
    end_date = parse_date_param(request.args.get('endDate'), 'end date')

    task_id = None
    if request.args.get('taskId'):
        task_id = parse_int_param(request.args.get('taskId'), None)
        if task_id is None:
            raise InvalidArgumentError('Invalid task ID. Must be a number.', code='INVALID_TASK_ID')

    default_limit = current_app.config.get('GOAL_HISTORY_PAGE_SIZE', 30)
    max_limit = current_app.config.get('GOAL_HISTORY_MAX_PAGE_SIZE', 100)
    limit = parse_int_param(request.args.get('limit'), default_limit)
    if limit < 1 or limit > max_limit:
        limit = default_limit
    offset = parse_int_param(request.args.get('offset'), 0)
    if offset < 0:
        offset = 0

    result = get_goal_history(session['user_id'], start_date, end_date, task_id, limit, offset)
    return jsonify({'success': True, 'data': result})


@goals_bp.route('/<int:task_id>/completion', methods=['GET'])
@login_required
def goal_completion(task_id):
    """Re-check one task's goal and report whether it was just completed"""
    goal_date = parse_date_param(request.args.get('date'))
    timezone = request.args.get('timezone') or None

    result = check_goal_completion(session['user_id'], task_id, goal_date, timezone)
    return jsonify({'success': True, 'data': result})


@goals_bp.route('/timezone', methods=['PUT'])
@login_required
def update_timezone():
    """Update the logged in user's timezone"""
    data = request.get_json(silent=True) or {}
    timezone = data.get('timezone')
    if not timezone or not isinstance(timezone, str):
        raise InvalidArgumentError('Timezone is required and must be a string.', code='INVALID_TIMEZONE')

    result = update_user_timezone(session['user_id'], timezone)
    return jsonify({'success': True, 'data': result})
