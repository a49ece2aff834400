import json
from io import BytesIO

from flask import Blueprint, request, jsonify, current_app, send_file

from ..document import DEFAULT_SETTINGS
from ..utils.form_utils import clean_str, to_number
from .auth_helpers import get_document_store, pin_required

settings_bp = Blueprint('settings', __name__)

EXPORT_FILENAME = 'trade-trackr-export.json'


@settings_bp.route('/settings', methods=['GET'])
@pin_required
def get_settings():
    try:
        document = get_document_store().load()
        return jsonify(document.get('settings') or dict(DEFAULT_SETTINGS)), 200
    except Exception as e:
        current_app.logger.exception(f"Error fetching settings: {e}")
        return jsonify({'error': 'Failed to fetch settings'}), 500


@settings_bp.route('/settings', methods=['PUT'])
@pin_required
def update_settings():
    """Update business name, VAT percentage and hourly rate"""
    try:
        data = request.get_json(silent=True) or {}

        def apply(doc):
            settings = doc.setdefault('settings', dict(DEFAULT_SETTINGS))
            if 'bizName' in data:
                settings['bizName'] = clean_str(data['bizName'])
            if 'vat' in data:
                settings['vat'] = to_number(data['vat'])
            if 'hourlyRate' in data:
                settings['hourlyRate'] = to_number(data['hourlyRate'])
            return settings

        settings = get_document_store().update(apply)
        current_app.logger.info("Settings updated")

        return jsonify({'success': True, 'settings': settings}), 200

    except Exception as e:
        current_app.logger.exception(f"Error updating settings: {e}")
        return jsonify({'error': 'Failed to update settings'}), 500


# ------------------------------------------------------------------------
# EXPORT / IMPORT
# ------------------------------------------------------------------------

@settings_bp.route('/export', methods=['GET'])
@pin_required
def export_data():
    """Download the whole document as indented JSON"""
    try:
        document = get_document_store().load()
        payload = BytesIO(json.dumps(document, indent=2).encode('utf-8'))
        return send_file(payload, mimetype='application/json', as_attachment=True, download_name=EXPORT_FILENAME)
    except Exception as e:
        current_app.logger.exception(f"Export failed: {e}")
        return jsonify({'error': 'Export failed'}), 500


@settings_bp.route('/import', methods=['POST'])
@pin_required
def import_data():
    """Replace the whole document with an uploaded JSON file (or a raw JSON body).

    The content is taken as-is; only unparseable JSON is refused.
    """
    try:
        if 'file' in request.files:
            raw = request.files['file'].read()
        else:
            raw = request.get_data()

        try:
            imported = json.loads(raw)
        except ValueError:
            current_app.logger.warning("Import refused: invalid JSON")
            return jsonify({'error': 'Invalid JSON'}), 400

        get_document_store().save(imported)
        current_app.logger.info("Document replaced by import")

        return jsonify({'success': True, 'message': 'Imported'}), 200

    except Exception as e:
        current_app.logger.exception(f"Import failed: {e}")
        return jsonify({'error': 'Import failed'}), 500
