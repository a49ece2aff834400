from datetime import datetime
from io import BytesIO

from fpdf import FPDF

from .document import find_by_id


def _num(value):
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def invoice_totals(job, settings, clients=()):
    """Quote + materials + labour, then VAT on top."""
    client = find_by_id(clients, job.get('clientId')) or {}
    total_materials = sum(_num(m.get('qty')) * _num(m.get('price')) for m in job.get('materials') or [])
    labor = _num(job.get('hours')) * _num(settings.get('hourlyRate'))
    quote = _num(job.get('quote'))
    subtotal = quote + total_materials + labor
    vat_pct = _num(settings.get('vat'))
    vat = subtotal * (vat_pct / 100)
    return {
        'jobId': job.get('id'),
        'title': job.get('title', ''),
        'clientName': client.get('name', ''),
        'address': job.get('address') or '',
        'bizName': settings.get('bizName', ''),
        'quote': round(quote, 2),
        'materials': round(total_materials, 2),
        'labor': round(labor, 2),
        'subtotal': round(subtotal, 2),
        'vatRate': vat_pct,
        'vat': round(vat, 2),
        'total': round(subtotal + vat, 2),
    }


# ------------------------------------------------------------------------
# PDF GENERATION (fpdf2)
# ------------------------------------------------------------------------

def pdf_text(value):
    """Core PDF fonts only cover Latin-1; anything else becomes '?'."""
    return str(value).encode('latin-1', 'replace').decode('latin-1')


class InvoicePDF(FPDF):
    biz_name = 'Your Business'

    def header(self):
        self.set_font('Helvetica', 'B', 16)
        self.cell(0, 10, pdf_text(self.biz_name), 0, 1, 'C')
        self.set_font('Helvetica', '', 12)
        self.cell(0, 5, 'INVOICE', 0, 1, 'C')
        self.ln(5)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 5, f'Page {self.page_no()}/{{nb}}', 0, 0, 'C')


def render_invoice_pdf(totals):
    """Render invoice totals (see invoice_totals) into PDF bytes."""
    pdf = InvoicePDF('P', 'mm', 'A4')
    pdf.biz_name = totals.get('bizName') or InvoicePDF.biz_name
    pdf.alias_nb_pages()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=20)

    line_height = 7
    HEADER_FILL = (230, 230, 230)

    pdf.set_font('Helvetica', '', 10)
    pdf.cell(0, line_height, f"Date: {datetime.now().strftime('%Y-%m-%d')}", 0, 1, 'R')

    for label, value in (('Job:', totals['title']),
                         ('Client:', totals['clientName']),
                         ('Address:', totals['address'])):
        pdf.set_x(pdf.l_margin)
        pdf.set_font('Helvetica', 'B', 10)
        pdf.cell(30, line_height, label, 0, 0, 'L')
        pdf.set_font('Helvetica', '', 10)
        pdf.multi_cell(0, line_height, pdf_text(value or '-'), 0, 'L')
    pdf.set_x(pdf.l_margin)
    pdf.ln(4)

    rows = [
        ('Quote', totals['quote']),
        ('Materials', totals['materials']),
        ('Labor', totals['labor']),
        ('Subtotal', totals['subtotal']),
        (f"VAT {totals['vatRate']:g}%", totals['vat']),
    ]
    for label, amount in rows:
        pdf.set_x(110)
        pdf.set_font('Helvetica', '', 10)
        pdf.cell(50, line_height, label, 'B', 0, 'L')
        pdf.cell(40, line_height, f"£{amount:,.2f}", 'B', 1, 'R')

    pdf.set_x(110)
    pdf.set_fill_color(*HEADER_FILL)
    pdf.set_font('Helvetica', 'B', 12)
    pdf.cell(50, 9, 'TOTAL:', 'T', 0, 'L', 1)
    pdf.cell(40, 9, f"£{totals['total']:,.2f}", 'T', 1, 'R', 1)

    return BytesIO(bytes(pdf.output()))
