from flask import Blueprint, request, jsonify, current_app

from ..document import new_material, find_by_id
from ..utils.form_utils import clean_str, to_number
from .auth_helpers import get_document_store, pin_required

material_bp = Blueprint('materials', __name__)


def _unit_price(data):
    """Parse unitPrice; returns (price, error)."""
    price = to_number(data.get('unitPrice'))
    if price < 0:
        return None, 'Unit price cannot be negative'
    return price, None


@material_bp.route('/materials', methods=['GET'])
@pin_required
def get_materials():
    try:
        document = get_document_store().load()
        return jsonify(document.get('materials', [])), 200
    except Exception as e:
        current_app.logger.exception(f"Error fetching materials: {e}")
        return jsonify({'error': 'Failed to fetch materials'}), 500


@material_bp.route('/materials', methods=['POST'])
@pin_required
def create_material():
    """Add a material to the price list"""
    try:
        data = request.get_json(silent=True) or {}

        name = clean_str(data.get('name'))
        if not name:
            return jsonify({'error': 'Name is required'}), 400

        price, error = _unit_price(data)
        if error:
            return jsonify({'error': error}), 400

        material = new_material(name, price)
        get_document_store().update(lambda doc: doc.setdefault('materials', []).append(material))

        current_app.logger.info(f"Material {material['id']} created")

        return jsonify({
            'success': True,
            'message': 'Material created successfully',
            'material': material
        }), 201

    except Exception as e:
        current_app.logger.exception(f"Error creating material: {e}")
        return jsonify({'error': f'Failed to create material: {str(e)}'}), 500


@material_bp.route('/materials/<string:material_id>', methods=['PUT'])
@pin_required
def update_material(material_id):
    """Edit a material. Line items already on jobs keep their own price."""
    try:
        data = request.get_json(silent=True) or {}

        if 'name' in data and not clean_str(data['name']):
            return jsonify({'error': 'Name is required'}), 400

        price = None
        if 'unitPrice' in data:
            price, error = _unit_price(data)
            if error:
                return jsonify({'error': error}), 400

        def apply(doc):
            material = find_by_id(doc.get('materials', []), material_id)
            if material is None:
                return None
            if 'name' in data:
                material['name'] = clean_str(data['name'])
            if price is not None:
                material['unitPrice'] = price
            return material

        material = get_document_store().update(apply)
        if material is None:
            return jsonify({'error': 'Material not found'}), 404

        current_app.logger.info(f"Material {material_id} updated")

        return jsonify({
            'success': True,
            'message': 'Material updated successfully',
            'material': material
        }), 200

    except Exception as e:
        current_app.logger.exception(f"Error updating material {material_id}: {e}")
        return jsonify({'error': 'Failed to update material'}), 500
