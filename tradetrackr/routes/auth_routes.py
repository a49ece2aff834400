from flask import Blueprint, request, jsonify, current_app

from ..credentials import validate_pin
from .auth_helpers import get_credential_gate, get_session_flag, pin_required

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/health', methods=['GET'])
def health_check():
    return {
        'status': 'ok',
        'message': 'Server is running'
    }, 200


@auth_bp.route('/auth/status', methods=['GET'])
def auth_status():
    """Whether a PIN is set and whether this session is unlocked"""
    try:
        return jsonify({
            'configured': get_credential_gate().is_configured(),
            'authenticated': get_session_flag().is_active()
        }), 200
    except Exception as e:
        current_app.logger.exception(f"Error reading auth status: {e}")
        return jsonify({'error': 'Failed to read auth status'}), 500


@auth_bp.route('/auth/pin', methods=['POST'])
def set_pin():
    """Set the PIN on first run, or change it from an unlocked session"""
    gate = get_credential_gate()
    try:
        if gate.is_configured() and not get_session_flag().is_active():
            return jsonify({'error': 'Sign in to change the PIN'}), 403

        data = request.get_json(silent=True) or {}
        pin = str(data.get('pin') or '').strip()
        confirm = str(data.get('confirm') or '').strip()

        if not pin or not confirm:
            return jsonify({'error': 'Enter and confirm PIN'}), 400
        if pin != confirm:
            return jsonify({'error': 'PINs do not match'}), 400

        is_valid, message = validate_pin(pin)
        if not is_valid:
            return jsonify({'error': message}), 400

        gate.set_pin(pin)
        current_app.logger.info("PIN set")

        return jsonify({
            'success': True,
            'message': 'PIN saved. Please sign in.'
        }), 200

    except Exception as e:
        current_app.logger.exception(f"Error setting PIN: {e}")
        return jsonify({'error': 'Failed to set PIN'}), 500


@auth_bp.route('/auth/login', methods=['POST'])
def login():
    try:
        data = request.get_json(silent=True) or {}
        pin = str(data.get('pin') or '').strip()
        if not pin:
            return jsonify({'error': 'Enter PIN'}), 400

        if not get_credential_gate().verify(pin):
            current_app.logger.warning("❌ Login failed: wrong PIN")
            return jsonify({'error': 'Wrong PIN'}), 401

        get_session_flag().set_active(True)
        current_app.logger.info("✅ Login successful")

        return jsonify({
            'success': True,
            'message': 'Login successful'
        }), 200
    except Exception as e:
        current_app.logger.error(f"❌ Login error: {e}")
        return jsonify({'error': str(e)}), 500


@auth_bp.route('/auth/logout', methods=['POST'])
@pin_required
def logout():
    get_session_flag().set_active(False)
    return jsonify({'message': 'Logged out successfully'}), 200


@auth_bp.route('/auth/reset', methods=['POST'])
def reset_app():
    """Erase the PIN and ALL local app data (the forgotten-PIN path)"""
    try:
        data = request.get_json(silent=True) or {}
        if data.get('confirm') is not True:
            return jsonify({
                'error': 'Reset will erase ALL local app data and remove PIN. Resend with confirm=true.'
            }), 400

        get_credential_gate().reset()
        get_session_flag().set_active(False)
        current_app.logger.warning("App reset: PIN and data erased")

        return jsonify({
            'success': True,
            'message': 'App reset. Please set a new PIN.'
        }), 200
    except Exception as e:
        current_app.logger.exception(f"Error resetting app: {e}")
        return jsonify({'error': 'Failed to reset app'}), 500
