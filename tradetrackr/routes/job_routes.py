# job_routes.py - Flask API endpoints for job management

from flask import Blueprint, request, jsonify, current_app, send_file
from werkzeug.utils import secure_filename

from ..document import (
    JOB_STATUSES, new_job, find_by_id, filter_jobs, dashboard,
    material_line_item, toggle_job
)
from ..invoice import invoice_totals, render_invoice_pdf
from ..utils.file_utils import allowed_photo, to_data_url
from ..utils.form_utils import clean_str, to_number
from .auth_helpers import get_document_store, pin_required

job_bp = Blueprint('jobs', __name__)

TRUTHY = ('1', 'true', 'yes', 'on')


def _client_ref(document, value):
    """Resolve a clientId form value; returns (client_id, error)."""
    client_id = clean_str(value) or None
    if client_id and find_by_id(document.get('clients', []), client_id) is None:
        return None, 'Client not found'
    return client_id, None


def _job_fields(data, document):
    """Validate the editable job fields present in `data`; returns (fields, error)."""
    fields = {}
    if 'title' in data:
        fields['title'] = clean_str(data['title'])
        if not fields['title']:
            return None, 'Please add a title'
    if 'clientId' in data:
        client_id, error = _client_ref(document, data['clientId'])
        if error:
            return None, error
        fields['clientId'] = client_id
    for field in ('address', 'notes'):
        if field in data:
            fields[field] = clean_str(data[field])
    for field in ('quote', 'hours'):
        if field in data:
            fields[field] = to_number(data[field])
    if 'status' in data:
        if data['status'] not in JOB_STATUSES:
            return None, f"Status must be one of: {', '.join(JOB_STATUSES)}"
        fields['status'] = data['status']
    return fields, None


@job_bp.route('/dashboard', methods=['GET'])
@pin_required
def get_dashboard():
    """Jobs starting today and upcoming jobs"""
    try:
        return jsonify(dashboard(get_document_store().load())), 200
    except Exception as e:
        current_app.logger.exception(f"Error building dashboard: {e}")
        return jsonify({'error': 'Failed to load dashboard'}), 500


@job_bp.route('/jobs', methods=['GET'])
@pin_required
def get_jobs():
    """Get all jobs with optional text and status filtering"""
    try:
        document = get_document_store().load()
        jobs = filter_jobs(
            document,
            query=request.args.get('q', ''),
            status=request.args.get('status', '')
        )
        return jsonify(jobs), 200
    except Exception as e:
        current_app.logger.exception(f"Error fetching jobs: {e}")
        return jsonify({'error': 'Failed to fetch jobs'}), 500


@job_bp.route('/jobs/<string:job_id>', methods=['GET'])
@pin_required
def get_job(job_id):
    try:
        job = find_by_id(get_document_store().load().get('jobs', []), job_id)
        if job is None:
            return jsonify({'error': 'Job not found'}), 404
        return jsonify(job), 200
    except Exception as e:
        current_app.logger.exception(f"Error fetching job {job_id}: {e}")
        return jsonify({'error': 'Failed to fetch job'}), 500


@job_bp.route('/jobs', methods=['POST'])
@pin_required
def create_job():
    """Create a new job; newest jobs come first"""
    try:
        data = request.get_json(silent=True) or {}
        store = get_document_store()

        if not clean_str(data.get('title')):
            return jsonify({'error': 'Please add a title'}), 400

        fields, error = _job_fields(data, store.load())
        if error:
            return jsonify({'error': error}), 400

        job = new_job(fields.pop('title'))
        job.update(fields)
        store.update(lambda doc: doc.setdefault('jobs', []).insert(0, job))

        current_app.logger.info(f"Job {job['id']} created")

        return jsonify({
            'success': True,
            'message': 'Job created successfully',
            'job': job
        }), 201

    except Exception as e:
        current_app.logger.exception(f"Error creating job: {e}")
        return jsonify({'error': f'Failed to create job: {str(e)}'}), 500


@job_bp.route('/jobs/<string:job_id>', methods=['PUT'])
@pin_required
def update_job(job_id):
    """Edit a job. Status may be set to any valid value directly."""
    try:
        data = request.get_json(silent=True) or {}
        store = get_document_store()

        fields, error = _job_fields(data, store.load())
        if error:
            return jsonify({'error': error}), 400

        def apply(doc):
            job = find_by_id(doc.get('jobs', []), job_id)
            if job is not None:
                job.update(fields)
            return job

        job = store.update(apply)
        if job is None:
            return jsonify({'error': 'Job not found'}), 404

        current_app.logger.info(f"Job {job_id} updated")

        return jsonify({
            'success': True,
            'message': 'Job updated successfully',
            'job': job
        }), 200

    except Exception as e:
        current_app.logger.exception(f"Error updating job {job_id}: {e}")
        return jsonify({'error': 'Failed to update job'}), 500


@job_bp.route('/jobs/<string:job_id>', methods=['DELETE'])
@pin_required
def delete_job(job_id):
    try:
        def apply(doc):
            jobs = doc.get('jobs', [])
            remaining = [j for j in jobs if j.get('id') != job_id]
            doc['jobs'] = remaining
            return len(remaining) != len(jobs)

        if not get_document_store().update(apply):
            return jsonify({'error': 'Job not found'}), 404

        current_app.logger.info(f"Job {job_id} deleted")

        return jsonify({'success': True, 'message': 'Job deleted successfully'}), 200

    except Exception as e:
        current_app.logger.exception(f"Error deleting job {job_id}: {e}")
        return jsonify({'error': 'Failed to delete job'}), 500


@job_bp.route('/jobs/<string:job_id>/toggle', methods=['POST'])
@pin_required
def toggle_job_status(job_id):
    """Start a pending job or finish a running one"""
    try:
        def apply(doc):
            job = find_by_id(doc.get('jobs', []), job_id)
            if job is None:
                return None, False
            return job, toggle_job(job)

        job, changed = get_document_store().update(apply)
        if job is None:
            return jsonify({'error': 'Job not found'}), 404
        if not changed:
            return jsonify({'error': 'Job is already completed'}), 409

        current_app.logger.info(f"Job {job_id} moved to {job['status']}")

        return jsonify({'success': True, 'job': job}), 200

    except Exception as e:
        current_app.logger.exception(f"Error toggling job {job_id}: {e}")
        return jsonify({'error': 'Failed to update job status'}), 500


@job_bp.route('/jobs/<string:job_id>/materials', methods=['POST'])
@pin_required
def add_material_to_job(job_id):
    """Add a material line item; the current unit price is copied onto the job"""
    try:
        data = request.get_json(silent=True) or {}
        material_id = clean_str(data.get('materialId'))
        qty = to_number(data.get('qty'))

        if not material_id:
            return jsonify({'error': 'materialId is required'}), 400
        if qty <= 0:
            return jsonify({'error': 'Quantity must be greater than zero'}), 400

        def apply(doc):
            job = find_by_id(doc.get('jobs', []), job_id)
            if job is None:
                return None, 'Job not found'
            material = find_by_id(doc.get('materials', []), material_id)
            if material is None:
                return None, 'Material not found'
            job.setdefault('materials', []).append(material_line_item(material, qty))
            return job, None

        job, error = get_document_store().update(apply)
        if error:
            return jsonify({'error': error}), 404

        current_app.logger.info(f"Material {material_id} x{qty:g} added to job {job_id}")

        return jsonify({'success': True, 'job': job}), 201

    except Exception as e:
        current_app.logger.exception(f"Error adding material to job {job_id}: {e}")
        return jsonify({'error': 'Failed to add material'}), 500


@job_bp.route('/jobs/<string:job_id>/photos', methods=['POST'])
@pin_required
def add_photo(job_id):
    """Attach a photo, either uploaded as multipart `photo` or sent as a data URL"""
    try:
        max_bytes = current_app.config['MAX_PHOTO_BYTES']

        if 'photo' in request.files:
            file = request.files['photo']
            filename = secure_filename(file.filename or '')
            if not filename or not allowed_photo(filename):
                return jsonify({'error': 'File type not allowed'}), 400
            raw = file.read()
            size = len(raw)
            confirmed = clean_str(request.form.get('confirm_large')).lower() in TRUTHY
            photo = to_data_url(raw, filename)
        else:
            data = request.get_json(silent=True) or {}
            photo = data.get('photo')
            if not isinstance(photo, str) or not photo.startswith('data:image/'):
                return jsonify({'error': 'No photo provided'}), 400
            size = len(photo.split(',', 1)[-1]) * 3 // 4
            confirmed = data.get('confirm_large') is True

        if size > max_bytes and not confirmed:
            return jsonify({
                'error': f'Photo is large (>{max_bytes // (1024 * 1024)}MB). Resend with confirm_large to continue.'
            }), 413

        def apply(doc):
            job = find_by_id(doc.get('jobs', []), job_id)
            if job is not None:
                job.setdefault('photos', []).append(photo)
            return job

        job = get_document_store().update(apply)
        if job is None:
            return jsonify({'error': 'Job not found'}), 404

        current_app.logger.info(f"Photo ({size} bytes) added to job {job_id}")

        return jsonify({'success': True, 'photoCount': len(job['photos'])}), 201

    except Exception as e:
        current_app.logger.exception(f"Error adding photo to job {job_id}: {e}")
        return jsonify({'error': 'Failed to add photo'}), 500


# ------------------------------------------------------------------------
# INVOICES
# ------------------------------------------------------------------------

def _invoice_for(job_id):
    document = get_document_store().load()
    job = find_by_id(document.get('jobs', []), job_id)
    if job is None:
        return None
    return invoice_totals(job, document.get('settings') or {}, document.get('clients', []))


@job_bp.route('/jobs/<string:job_id>/invoice', methods=['GET'])
@pin_required
def get_invoice(job_id):
    try:
        totals = _invoice_for(job_id)
        if totals is None:
            return jsonify({'error': 'Job not found'}), 404
        return jsonify(totals), 200
    except Exception as e:
        current_app.logger.exception(f"Error building invoice for job {job_id}: {e}")
        return jsonify({'error': 'Failed to build invoice'}), 500


@job_bp.route('/jobs/<string:job_id>/invoice.pdf', methods=['GET'])
@pin_required
def download_invoice_pdf(job_id):
    """Generates a PDF invoice for one job."""
    try:
        totals = _invoice_for(job_id)
        if totals is None:
            return jsonify({'error': 'Job not found'}), 404

        pdf_file = render_invoice_pdf(totals)
        title = secure_filename(totals['title']) or job_id
        filename = f"Invoice_{title}.pdf"

        return send_file(pdf_file, mimetype='application/pdf', as_attachment=True, download_name=filename)

    except Exception as e:
        current_app.logger.exception(f"Invoice PDF generation failed: {e}")
        return jsonify({"error": f"Server failed to generate Invoice PDF: {str(e)}"}), 500
