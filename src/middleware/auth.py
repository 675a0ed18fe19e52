"""Authentication middleware for trigger callers"""
from functools import wraps
from flask import request, jsonify, current_app
from config.firebase_config import FirebaseConfig

def require_trigger_key(f):
    """
    Decorator to require and validate a trigger key

    Expects header: X-Trigger-Key: <key>

    On success, passes the caller name to the wrapped function
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_app.config.get('TRIGGER_AUTH_ENABLED', True):
            return f(caller='anonymous', *args, **kwargs)

        trigger_key = request.headers.get(FirebaseConfig.TRIGGER_KEY_HEADER)

        if not trigger_key:
            return jsonify({
                'error': 'Missing authentication',
                'message': f'{FirebaseConfig.TRIGGER_KEY_HEADER} header is required'
            }), 401

        trigger_keys = current_app.config['SECRET_SERVICE'].get_trigger_keys()

        caller = None
        for name, key in trigger_keys.items():
            if key == trigger_key:
                caller = name
                break

        if not caller:
            return jsonify({
                'error': 'Invalid authentication',
                'message': 'Invalid trigger key'
            }), 401

        return f(caller=caller, *args, **kwargs)

    return decorated_function
