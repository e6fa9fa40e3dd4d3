from flask import Blueprint, jsonify, session
from routes.auth import login_required
from services import get_user_stats

user_bp = Blueprint('user', __name__)


@user_bp.route('/stats', methods=['GET'])
@login_required
def stats():
    """Lifetime points for the logged in user, overall and per task"""
    return jsonify({'success': True, 'data': get_user_stats(session['user_id'])})
