from flask import Blueprint, request, session, current_app, jsonify
from models import User
from services import create_user, authenticate_user
from extensions import db
import re
from functools import wraps

auth_bp = Blueprint('auth', __name__)

def is_valid_email(email):
    """Simple email validation"""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return re.match(pattern, email) is not None

def error_response(code, message, status):
    return jsonify({'success': False, 'error': {'code': code, 'message': message}}), status

@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not is_valid_email(email):
        return error_response('INVALID_EMAIL', 'Please enter a valid email address.', 400)
    if not 3 <= len(username) <= 50:
        return error_response('INVALID_USERNAME', 'Username must be between 3 and 50 characters.', 400)
    if len(password) < 8:
        return error_response('INVALID_PASSWORD', 'Password must be at least 8 characters long.', 400)

    user = create_user(email=email, username=username, password=password, timezone=data.get('timezone'))
    current_app.logger.info(f'New user registered: {email}')
    return jsonify({'success': True, 'data': user.to_dict()}), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    if not email or not password:
        return error_response('MISSING_CREDENTIALS', 'Please enter both email and password.', 400)

    user = authenticate_user(email, password)
    if user is None:
        current_app.logger.info(f'Failed login attempt for {email}')
        return error_response('INVALID_CREDENTIALS', 'Invalid email or password.', 401)

    session['user_id'] = user.id
    session['user_email'] = user.email
    current_app.logger.info(f'User {email} logged in successfully')
    return jsonify({'success': True, 'data': user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
def logout():
    user_email = session.get('user_email', 'Unknown')
    session.clear()
    current_app.logger.info(f'User {user_email} logged out')
    return jsonify({'success': True})

def login_required(f):
    """Decorator to require login for routes"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return error_response('UNAUTHORIZED', 'Please log in to access this resource.', 401)
        return f(*args, **kwargs)
    return decorated_function

def get_current_user():
    """Get current logged in user"""
    if 'user_id' in session:
        return db.session.get(User, session['user_id'])
    return None

@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """Profile of the logged in user"""
    user = get_current_user()
    if user is None:
        session.clear()
        return error_response('USER_NOT_FOUND', 'User not found', 404)
    return jsonify({'success': True, 'data': user.to_dict()})
