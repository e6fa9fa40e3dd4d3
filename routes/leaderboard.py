from flask import Blueprint, jsonify
from routes.auth import login_required
from routes.goals import parse_int_param
from services import get_overall_leaderboard, get_task_leaderboard
from services.exceptions import InvalidArgumentError

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('', methods=['GET'])
@login_required
def overall():
    """Users ranked by total points"""
    return jsonify({'success': True, 'data': get_overall_leaderboard()})


@leaderboard_bp.route('/<task_id>', methods=['GET'])
@login_required
def by_task(task_id):
    """Users ranked by points earned on one task"""
    task_id = parse_int_param(task_id, None)
    if task_id is None:
        raise InvalidArgumentError('Invalid task ID. Must be a number.', code='INVALID_TASK_ID')

    return jsonify({'success': True, 'data': get_task_leaderboard(task_id)})
