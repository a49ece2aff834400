from flask import Blueprint, request, jsonify, current_app

from ..document import new_client, find_by_id
from ..utils.form_utils import clean_str
from .auth_helpers import get_document_store, pin_required

client_bp = Blueprint('clients', __name__)

EDITABLE_FIELDS = ('name', 'phone', 'email', 'address')


# ==========================================
# CLIENT ENDPOINTS
# ==========================================

@client_bp.route('/clients', methods=['GET'])
@pin_required
def get_clients():
    """Get all clients"""
    try:
        document = get_document_store().load()
        return jsonify(document.get('clients', [])), 200
    except Exception as e:
        current_app.logger.exception(f"Error fetching clients: {e}")
        return jsonify({'error': 'Failed to fetch clients'}), 500


@client_bp.route('/clients', methods=['POST'])
@pin_required
def create_client():
    """Create a new client"""
    try:
        data = request.get_json(silent=True) or {}

        name = clean_str(data.get('name'))
        if not name:
            return jsonify({'error': 'Name is required'}), 400

        client = new_client(
            name,
            phone=clean_str(data.get('phone')),
            email=clean_str(data.get('email')),
            address=clean_str(data.get('address')),
        )
        get_document_store().update(lambda doc: doc.setdefault('clients', []).append(client))

        current_app.logger.info(f"Client {client['id']} created")

        return jsonify({
            'success': True,
            'message': 'Client created successfully',
            'client': client
        }), 201

    except Exception as e:
        current_app.logger.exception(f"Error creating client: {e}")
        return jsonify({'error': f'Failed to create client: {str(e)}'}), 500


@client_bp.route('/clients/<string:client_id>', methods=['PUT'])
@pin_required
def update_client(client_id):
    """Update a client"""
    try:
        data = request.get_json(silent=True) or {}
        if 'name' in data and not clean_str(data['name']):
            return jsonify({'error': 'Name is required'}), 400

        def apply(doc):
            client = find_by_id(doc.get('clients', []), client_id)
            if client is None:
                return None
            for field in EDITABLE_FIELDS:
                if field in data:
                    client[field] = clean_str(data[field])
            return client

        client = get_document_store().update(apply)
        if client is None:
            return jsonify({'error': 'Client not found'}), 404

        current_app.logger.info(f"Client {client_id} updated")

        return jsonify({
            'success': True,
            'message': 'Client updated successfully',
            'client': client
        }), 200

    except Exception as e:
        current_app.logger.exception(f"Error updating client {client_id}: {e}")
        return jsonify({'error': 'Failed to update client'}), 500
