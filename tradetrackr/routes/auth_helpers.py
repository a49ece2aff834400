from functools import wraps
from flask import request, jsonify, current_app, session

from ..session_flag import SessionFlag


def get_document_store():
    return current_app.extensions['document_store']


def get_credential_gate():
    return current_app.extensions['credential_gate']


def get_offline_cache():
    return current_app.extensions['offline_cache']


def get_session_flag():
    return SessionFlag(session)


def pin_required(f):
    """Decorator to require an unlocked session"""
    @wraps(f)
    def decorated(*args, **kwargs):
        # Handle OPTIONS requests
        if request.method == 'OPTIONS':
            return f(*args, **kwargs)

        if not get_session_flag().is_active():
            return jsonify({'error': 'PIN required'}), 401

        return f(*args, **kwargs)

    return decorated
