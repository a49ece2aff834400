"""The application document: clients, materials, jobs and settings.

Everything lives in one JSON-serialisable dict. These helpers build and
query that dict; persisting it is the store's job.
"""
import random
import string
from datetime import datetime, timezone

JOB_STATUSES = ('pending', 'in_progress', 'completed')

DEFAULT_SETTINGS = {'bizName': 'Your Business', 'vat': 0, 'hourlyRate': 0}

_ID_ALPHABET = string.digits + string.ascii_lowercase


def uid(prefix='id'):
    return prefix + '_' + ''.join(random.choice(_ID_ALPHABET) for _ in range(7))


def now_iso():
    """Current UTC time as an ISO-8601 string with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


# ----------------------------------
# Entity factories
# ----------------------------------

def new_client(name, phone='', email='', address=''):
    return {
        'id': uid('client'),
        'name': name,
        'phone': phone,
        'email': email,
        'address': address,
        'createdAt': now_iso(),
    }


def new_material(name, unit_price=0.0):
    return {
        'id': uid('mat'),
        'name': name,
        'unitPrice': unit_price,
        'createdAt': now_iso(),
    }


def new_job(title, client_id=None, address='', notes='', quote=0, hours=0):
    return {
        'id': uid('job'),
        'title': title,
        'clientId': client_id,
        'address': address,
        'notes': notes,
        'status': 'pending',
        'quote': quote,
        'hours': hours,
        'materials': [],
        'photos': [],
        'startDate': None,
        'endDate': None,
        'createdAt': now_iso(),
    }


def material_line_item(material, qty):
    """Line item for a job; the price is copied, not referenced."""
    return {
        'id': material['id'],
        'name': material['name'],
        'qty': qty,
        'price': material.get('unitPrice'),
    }


def seed_document():
    client = new_client('John Smith', phone='07111 222333', address='12 High St')
    material = new_material('Boiler', 450.0)
    job = new_job(
        'Kitchen Tap Replacement',
        client_id=client['id'],
        address='12 High St, London',
        notes='Replace tap; check valves.',
        quote=150,
        hours=1.5,
    )
    job['materials'].append(material_line_item(material, 1))
    return {
        'clients': [client],
        'materials': [material],
        'jobs': [job],
        'settings': dict(DEFAULT_SETTINGS),
    }


# ----------------------------------
# Lookups
# ----------------------------------

def find_by_id(items, item_id):
    for item in items:
        if item.get('id') == item_id:
            return item
    return None


def client_name(document, client_id):
    client = find_by_id(document.get('clients', []), client_id)
    return client['name'] if client else 'No client'


def filter_jobs(document, query='', status=''):
    """Jobs whose title, notes or client name contain `query`, optionally with one status."""
    q = (query or '').lower()
    matches = []
    for job in document.get('jobs', []):
        matches_q = (
            not q
            or q in (job.get('title') or '').lower()
            or q in (job.get('notes') or '').lower()
            or q in client_name(document, job.get('clientId')).lower()
        )
        matches_status = not status or job.get('status') == status
        if matches_q and matches_status:
            matches.append(job)
    return matches


def dashboard(document, today=None, limit=10):
    """Jobs starting today, and up to `limit` jobs that are unscheduled or start today or later."""
    today = today or now_iso()[:10]
    jobs = document.get('jobs', [])
    jobs_today = [j for j in jobs if j.get('startDate') and j['startDate'][:10] == today]
    upcoming = [j for j in jobs if not j.get('startDate') or j['startDate'][:10] >= today]
    return {'today': jobs_today, 'upcoming': upcoming[:limit]}


# ----------------------------------
# Job transitions
# ----------------------------------

def toggle_job(job):
    """Advance a job: pending -> in_progress -> completed.

    Returns False when the job is already completed.
    """
    if job.get('status') == 'completed':
        return False
    if job.get('status') == 'in_progress':
        job['status'] = 'completed'
        job['endDate'] = now_iso()
    else:
        job['status'] = 'in_progress'
        job['startDate'] = now_iso()
    return True
