from flask import Blueprint, request, jsonify, session
from routes.auth import login_required
from routes.goals import parse_date_param
from services import get_progress_for_day, log_progress
from services.exceptions import InvalidArgumentError

progress_bp = Blueprint('progress', __name__)


@progress_bp.route('', methods=['POST'])
@login_required
def create_progress():
    """Log progress for a task and report any goal completion it caused"""
    data = request.get_json(silent=True) or {}
    task_id = data.get('task_id')
    value = data.get('value')

    if not isinstance(task_id, int) or isinstance(task_id, bool):
        raise InvalidArgumentError('task_id is required and must be an integer.')
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidArgumentError('value is required and must be a number.')

    logged_date = parse_date_param(data.get('date'))
    result = log_progress(session['user_id'], task_id, value, logged_date)
    return jsonify({'success': True, 'data': result}), 201


@progress_bp.route('/today', methods=['GET'])
@login_required
def today_progress():
    """Entries logged by the current user for today (or ?date=YYYY-MM-DD)"""
    logged_date = parse_date_param(request.args.get('date'))
    timezone = request.args.get('timezone') or None

    result = get_progress_for_day(session['user_id'], logged_date, timezone)
    return jsonify({'success': True, 'data': result})
