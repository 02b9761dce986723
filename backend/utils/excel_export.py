from io import BytesIO
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session

from crud.payments import sum_paid
from models.booking import Booking

HEADERS = [
    "BOOKING NO", "DATE", "CUSTOMER", "MOBILE", "PROJECT", "PLOT", "AREA", "RATE",
    "DISCOUNT", "EFF. RATE", "PLC", "TOTAL", "PAID", "BALANCE", "BROKER", "COMMISSION",
    "STATUS", "REGISTRY",
]
MONEY_FORMAT = '#,##,##0.00'
MONEY_COLUMNS = (8, 9, 10, 11, 12, 13, 14, 16)


def export_bookings(db: Session, bookings: List[Booking]) -> BytesIO:
    """Write one row per booking with its ledger balance and a totals row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Bookings"

    ws.append(HEADERS)
    header_fill = PatternFill(start_color="FF6600", end_color="FF6600", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for col_idx, cell in enumerate(ws[1]):
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.column_dimensions[get_column_letter(col_idx + 1)].width = 14

    total_amount = total_paid = total_commission = 0
    for booking in bookings:
        paid = sum_paid(db, booking.id)
        amount = booking.total_amount
        commission = booking.broker_commission
        ws.append([
            booking.booking_no,
            booking.booking_date,
            booking.customer.applicant_name if booking.customer else "",
            booking.customer.mobile_no if booking.customer else "",
            booking.project.name if booking.project else "",
            booking.plot_no,
            float(booking.area),
            float(booking.rate),
            float(booking.discount),
            float(booking.effective_rate),
            float(booking.plc),
            float(amount),
            float(paid),
            float(amount - paid),
            booking.broker.name if booking.broker else "",
            float(commission),
            booking.status.value,
            "Yes" if booking.registry_completed else "No",
        ])
        total_amount += amount
        total_paid += paid
        total_commission += commission

    ws.append([
        "TOTAL", "", "", "", "", "", "", "", "", "", "",
        float(total_amount), float(total_paid), float(total_amount - total_paid),
        "", float(total_commission), "", "",
    ])
    bold_font = Font(bold=True)
    for cell in ws[ws.max_row]:
        cell.font = bold_font

    for row in ws.iter_rows(min_row=2):
        row[1].number_format = 'DD-MM-YYYY'
        for col in MONEY_COLUMNS:
            row[col - 1].number_format = MONEY_FORMAT

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
