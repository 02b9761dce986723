from fpdf import FPDF
from sqlalchemy.orm import Session
import logging
import os

from crud.bookings import balance_for
from crud.payments import get_payment_or_404
from models.booking import Booking
from models.payments import Payment
from utils.formatting import format_indian_currency, rupees_in_words

logger = logging.getLogger(__name__)

COMPANY_NAME = os.getenv("COMPANY_NAME", "Plot Booking Office")
COMPANY_ADDRESS = os.getenv("COMPANY_ADDRESS", "")

# Searched in order when PDF_FONT_PATH is not set
UNICODE_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/noto/NotoSansDevanagari-Regular.ttf",
    "/usr/share/fonts/noto/NotoSansDevanagari-Regular.ttf",
    "/usr/share/fonts/truetype/lohit-devanagari/Lohit-Devanagari.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/gnu-free/FreeSans.ttf",
]

TERMS = [
    "1. This booking is subject to approval and verification of documents.",
    "2. The balance amount must be paid as per the agreed payment schedule.",
    "3. Any cancellation will be subject to cancellation charges as per company policy.",
    "4. All disputes are subject to local jurisdiction only.",
]


def unicode_font_path():
    """Return the TrueType font used for customer text, or None if there is none.

    PDF_FONT_PATH wins when set; otherwise a few common system locations are tried.
    """
    configured = os.getenv("PDF_FONT_PATH")
    candidates = [configured] if configured else UNICODE_FONT_CANDIDATES
    for path in candidates:
        if path and os.path.isfile(path):
            return path
    if configured:
        logger.warning(f"PDF_FONT_PATH {configured} does not exist, falling back to Helvetica")
    return None


def _money(amount) -> str:
    return format_indian_currency(amount, symbol="Rs. ")


class PDF(FPDF):
    title_text = "Receipt"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.text_font = 'Helvetica'
        font_path = unicode_font_path()
        if font_path:
            bold_path = os.getenv("PDF_FONT_BOLD_PATH") or font_path
            self.add_font('Unicode', '', font_path)
            self.add_font('Unicode', 'B', bold_path)
            self.add_font('Unicode', 'I', font_path)
            self.text_font = 'Unicode'

    def printable(self, value) -> str:
        text = str(value if value is not None else '-')
        if self.text_font == 'Helvetica':
            # Core fonts are latin-1 only; unsupported characters print as '?'
            text = text.encode('latin-1', 'replace').decode('latin-1')
        return text

    def header(self):
        self.set_font(self.text_font, 'B', 16)
        self.cell(0, 8, self.printable(COMPANY_NAME), 0, 1, 'C')
        if COMPANY_ADDRESS:
            self.set_font(self.text_font, '', 10)
            self.cell(0, 6, self.printable(COMPANY_ADDRESS), 0, 1, 'C')
        self.set_font(self.text_font, 'B', 12)
        self.cell(0, 10, self.title_text, 0, 1, 'C')
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font(self.text_font, 'I', 8)
        self.cell(0, 10, f'Page {self.page_no()}', 0, 0, 'C')

    def row(self, label: str, value) -> None:
        self.set_font(self.text_font, 'B', 10)
        self.cell(55, 8, label, 1, 0, 'L')
        self.set_font(self.text_font, '', 10)
        self.multi_cell(0, 8, self.printable(value), border=1, align='L', new_x='LMARGIN', new_y='NEXT')


def _customer_rows(pdf: PDF, db_booking: Booking) -> None:
    customer = db_booking.customer
    pdf.row('Customer No', customer.customer_no)
    pdf.row('Applicant Name', customer.applicant_name)
    if customer.father_or_husband_name:
        pdf.row('Father/Husband Name', customer.father_or_husband_name)
    if customer.address:
        pdf.row('Address', customer.address)
    if customer.mobile_no:
        pdf.row('Mobile No', customer.mobile_no)


def generate_payment_receipt(db: Session, payment_id: int) -> bytes:
    """
    Builds the PDF receipt for a booking payment.

    The balance shown is the ledger balance at the time the receipt is
    generated, computed from the non-deleted payments.

    Returns:
        The PDF document as bytes.
    """
    db_payment: Payment = get_payment_or_404(db, payment_id)
    db_booking = db_payment.booking
    balance = balance_for(db, db_booking)

    pdf = PDF()
    pdf.title_text = 'PAYMENT RECEIPT'
    pdf.add_page()

    pdf.row('Receipt No', db_payment.receipt_no)
    pdf.row('Receipt Date', db_payment.receipt_date.strftime('%d-%m-%Y'))
    pdf.row('Booking No', db_booking.booking_no)
    pdf.row('Project', db_booking.project.name)
    pdf.row('Plot No', db_booking.plot_no)
    pdf.ln(4)

    _customer_rows(pdf, db_booking)
    pdf.ln(4)

    pdf.row('Amount Received', _money(db_payment.payment_amount))
    pdf.row('Amount in Words', rupees_in_words(db_payment.payment_amount))
    pdf.row('Payment Mode', db_payment.payment_mode.value)
    pdf.row('Payment Type', db_payment.payment_type.value)
    if db_payment.installment_number:
        pdf.row('Installment No', db_payment.installment_number)
    if db_payment.transaction_no:
        pdf.row('Transaction No', db_payment.transaction_no)
    if db_payment.remarks:
        pdf.row('Remarks', db_payment.remarks)
    pdf.ln(4)

    pdf.row('Total Amount', _money(balance.total_amount))
    pdf.row('Total Paid', _money(balance.total_paid))
    pdf.row('Balance Due', _money(balance.remaining_amount))

    pdf.ln(20)
    pdf.set_font(pdf.text_font, '', 10)
    pdf.cell(95, 8, 'Customer Signature', 0, 0, 'L')
    pdf.cell(0, 8, 'Authorized Signature', 0, 1, 'R')

    logger.debug(f"Receipt generated for payment {db_payment.receipt_no}")
    return bytes(pdf.output())


def generate_booking_slip(db: Session, db_booking: Booking) -> bytes:
    """Builds the booking slip PDF with property terms and the current balance."""
    balance = balance_for(db, db_booking)

    pdf = PDF()
    pdf.title_text = 'BOOKING SLIP'
    pdf.add_page()

    pdf.row('Booking No', db_booking.booking_no)
    pdf.row('Booking Date', db_booking.booking_date.strftime('%d-%m-%Y'))
    pdf.row('Status', db_booking.status.value)
    pdf.ln(4)

    _customer_rows(pdf, db_booking)
    pdf.ln(4)

    pdf.row('Project', db_booking.project.name)
    pdf.row('Plot No', db_booking.plot_no)
    pdf.row('Area (sq. ft.)', db_booking.area)
    pdf.row('Rate (per sq. ft.)', _money(db_booking.rate))
    pdf.row('Discount (per sq. ft.)', _money(db_booking.discount))
    pdf.row('Effective Rate', _money(db_booking.effective_rate))
    pdf.row('PLC', _money(db_booking.plc))
    pdf.row('Total Amount', _money(balance.total_amount))
    pdf.row('Total in Words', rupees_in_words(balance.total_amount))
    if db_booking.legal_details:
        pdf.row('Legal Details', db_booking.legal_details)
    pdf.ln(4)

    pdf.row('Total Paid', _money(balance.total_paid))
    pdf.row('Balance Due', _money(balance.remaining_amount))
    pdf.ln(6)

    pdf.set_font(pdf.text_font, 'B', 11)
    pdf.cell(0, 8, 'Terms & Conditions', 0, 1, 'L')
    pdf.set_font(pdf.text_font, '', 9)
    for line in TERMS:
        pdf.multi_cell(0, 6, line, new_x='LMARGIN', new_y='NEXT')

    pdf.ln(20)
    pdf.set_font(pdf.text_font, '', 10)
    pdf.cell(95, 8, 'Customer Signature', 0, 0, 'L')
    pdf.cell(0, 8, 'Authorized Signature', 0, 1, 'R')

    return bytes(pdf.output())
