import re

from tradetrackr.document import (
    dashboard, filter_jobs, material_line_item, new_job, now_iso, seed_document,
    toggle_job, uid
)
from tradetrackr.invoice import invoice_totals


def test_uid_format():
    assert re.match(r'^job_[0-9a-z]{7}$', uid('job'))
    assert uid('job') != uid('job')


def test_seed_ids_are_unique_per_call():
    a, b = seed_document(), seed_document()
    assert a['clients'][0]['id'] != b['clients'][0]['id']


def test_line_item_copies_price():
    material = {'id': 'mat_1', 'name': 'Valve', 'unitPrice': 8.0}
    line = material_line_item(material, 2)
    material['unitPrice'] = 10.0
    assert line['price'] == 8.0


def test_toggle_job():
    job = new_job('Fix leak')
    assert toggle_job(job) and job['status'] == 'in_progress'
    assert toggle_job(job) and job['status'] == 'completed'
    assert toggle_job(job) is False
    assert job['status'] == 'completed'


def test_dashboard_splits_today_and_upcoming():
    past = new_job('Past')
    past['startDate'] = '2020-01-01T09:00:00.000Z'
    today = new_job('Today')
    today['startDate'] = '2026-03-04T08:00:00.000Z'
    later = new_job('Later')
    later['startDate'] = '2026-05-01T08:00:00.000Z'
    unscheduled = new_job('Unscheduled')
    doc = {'jobs': [past, today, later, unscheduled], 'clients': []}

    board = dashboard(doc, today='2026-03-04')

    assert [j['title'] for j in board['today']] == ['Today']
    assert [j['title'] for j in board['upcoming']] == ['Today', 'Later', 'Unscheduled']


def test_dashboard_limits_upcoming():
    doc = {'jobs': [new_job(str(i)) for i in range(15)]}
    assert len(dashboard(doc)['upcoming']) == 10


def test_filter_jobs_without_filters_returns_all():
    doc = seed_document()
    assert filter_jobs(doc) == doc['jobs']


def test_invoice_totals_tolerate_missing_numbers():
    job = {'id': 'job_1', 'title': 'T', 'materials': [{'qty': 2, 'price': None}], 'quote': None}
    totals = invoice_totals(job, {})
    assert totals['total'] == 0.0
    assert totals['clientName'] == ''


def test_now_iso_is_utc():
    assert now_iso().endswith('Z')
