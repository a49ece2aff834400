import requests
from flask import Blueprint, request, jsonify, current_app, Response

from .auth_helpers import get_offline_cache, pin_required

offline_bp = Blueprint('offline', __name__, url_prefix='/offline')

PROXY_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


def is_navigation():
    """Full-page loads: browsers send Sec-Fetch-Mode, older ones only ask for HTML"""
    mode = request.headers.get('Sec-Fetch-Mode')
    if mode:
        return mode == 'navigate'
    return request.method == 'GET' and 'text/html' in request.headers.get('Accept', '')


@offline_bp.route('/install', methods=['POST'])
@pin_required
def install_cache():
    cache = get_offline_cache()
    try:
        count = cache.install()
        current_app.logger.info(f"Offline cache {cache.cache_name} installed ({count} assets)")
        return jsonify({'success': True, 'cache': cache.cache_name, 'assets': count}), 200
    except requests.RequestException as e:
        current_app.logger.error(f"❌ Offline cache install failed: {e}")
        return jsonify({'error': f'Install failed: {str(e)}'}), 502


@offline_bp.route('/activate', methods=['POST'])
@pin_required
def activate_cache():
    cache = get_offline_cache()
    try:
        deleted = cache.activate()
        return jsonify({'success': True, 'cache': cache.cache_name, 'deleted': deleted}), 200
    except Exception as e:
        current_app.logger.exception(f"Offline cache activate failed: {e}")
        return jsonify({'error': 'Activate failed'}), 500


@offline_bp.route('/', defaults={'asset_path': ''}, methods=PROXY_METHODS)
@offline_bp.route('/<path:asset_path>', methods=PROXY_METHODS)
def proxy_asset(asset_path):
    """Serve an app asset cache-first; other methods pass through to the origin"""
    path = '/' + asset_path
    if request.query_string:
        path += '?' + request.query_string.decode('utf-8')

    cache = get_offline_cache()
    try:
        if request.method == 'GET':
            response = cache.fetch('GET', path, navigate=is_navigation())
        else:
            response = cache.fetch(
                request.method, path,
                data=request.get_data(),
                headers={'Content-Type': request.content_type} if request.content_type else None
            )
    except requests.RequestException as e:
        current_app.logger.warning(f"Pass-through {request.method} {path} failed: {e}")
        return jsonify({'error': 'Upstream unavailable'}), 502

    if response is None:
        return jsonify({'error': 'Offline and not cached'}), 504

    return Response(response.body, status=response.status_code, content_type=response.content_type)
