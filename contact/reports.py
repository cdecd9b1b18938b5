"""
Contact Submissions Excel Export

Builds the workbook attached to admin notifications: one detail sheet
with every submission (newest first) and a summary sheet with status
counts.
"""
from decimal import Decimal, ROUND_HALF_UP
from io import BytesIO
from zoneinfo import ZoneInfo
import logging

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter
from django.conf import settings
from django.utils import timezone

from .exceptions import PersistenceError, ReportError
from .models import ContactMessage
from .store import ContactStore

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

NOT_PROVIDED = 'Not provided'

DETAIL_COLUMNS = [
    ("Sr. No.", 8),
    ("Submission Date", 22),
    ("Name", 25),
    ("Email", 35),
    ("Phone", 18),
    ("LinkedIn/Naukri Profile", 40),
    ("Message", 60),
    ("Status", 12),
    ("IP Address", 15),
    ("Contact ID", 38),
]

# (fill, font colour) per status
STATUS_COLOURS = {
    ContactMessage.STATUS_NEW: ("E3F2FD", "1976D2"),
    ContactMessage.STATUS_READ: ("FFF3E0", "F57C00"),
    ContactMessage.STATUS_REPLIED: ("E8F5E8", "388E3C"),
    ContactMessage.STATUS_ARCHIVED: ("FAFAFA", "757575"),
}


def get_report_filename(when=None):
    """Attachment filename for the export, e.g. contact-database-2024-01-31.xlsx"""
    when = when or timezone.now()
    return f"contact-database-{when.strftime('%Y-%m-%d')}.xlsx"


def format_percentage(count, total):
    """Whole-number percentage rounded half up; 0% when there is nothing to count."""
    if not total:
        return "0%"
    value = (Decimal(count) * 100 / Decimal(total)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return f"{value}%"


def build_summary(messages, generated_at=None):
    """
    Aggregate submissions by status.

    Returns:
        dict: total, per-status count and percentage, generation timestamp
    """
    total = len(messages)
    by_status = {}
    for status, _ in ContactMessage.STATUS_CHOICES:
        count = sum(1 for message in messages if message.status == status)
        by_status[status] = {
            'count': count,
            'percentage': format_percentage(count, total),
        }
    return {
        'total': total,
        'by_status': by_status,
        'generated_at': generated_at or timezone.now(),
    }


class ContactReportBuilder:
    """
    Render every stored submission into an in-memory .xlsx workbook.

    Usage:
        content = ContactReportBuilder().build()
    """

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="667EEA", end_color="667EEA", fill_type="solid")
    summary_fill = PatternFill(start_color="28A745", end_color="28A745", fill_type="solid")
    zebra_fill = PatternFill(start_color="F8F9FA", end_color="F8F9FA", fill_type="solid")
    thin_border = Border(
        left=Side(style='thin', color="E0E0E0"),
        right=Side(style='thin', color="E0E0E0"),
        top=Side(style='thin', color="E0E0E0"),
        bottom=Side(style='thin', color="E0E0E0")
    )

    def __init__(self, store=None):
        self.store = store or ContactStore()
        self._report_tz = None

    @property
    def report_tz(self):
        if self._report_tz is None:
            self._report_tz = ZoneInfo(getattr(settings, 'CONTACT_REPORT_TIME_ZONE', 'UTC'))
        return self._report_tz

    def build(self) -> bytes:
        """
        Build the workbook and return its bytes.

        Raises:
            ReportError: if the store cannot be read or the workbook cannot be written
        """
        try:
            messages = self.store.list_all_by_recency()
        except PersistenceError as exc:
            raise ReportError(f"Failed to load contact messages: {exc}") from exc

        logger.info("Building contact export with %d submissions", len(messages))

        try:
            wb = openpyxl.Workbook()
            wb.properties.creator = getattr(settings, 'CONTACT_OWNER_NAME', 'Portfolio')

            ws = wb.active
            ws.title = "Contact Submissions"
            self._write_detail_sheet(ws, messages)

            summary = build_summary(messages)
            self._write_summary_sheet(wb.create_sheet("Summary"), summary)

            output = BytesIO()
            wb.save(output)
        except Exception as exc:
            raise ReportError(f"Failed to create Excel file: {exc}") from exc

        return output.getvalue()

    def format_date(self, value):
        """Submission date in the report time zone, e.g. 05 Mar 2024, 02:30 PM"""
        return timezone.localtime(value, self.report_tz).strftime('%d %b %Y, %I:%M %p')

    def detail_row(self, index, message):
        return [
            index,
            self.format_date(message.created_at),
            message.name,
            message.email,
            message.phone or NOT_PROVIDED,
            message.linkedin_profile or NOT_PROVIDED,
            message.message,
            message.status.upper(),
            message.ip_address or 'Unknown',
            str(message.id),
        ]

    def _write_detail_sheet(self, ws, messages):
        ws.sheet_properties.tabColor = "667EEA"

        for col, (title, width) in enumerate(DETAIL_COLUMNS, start=1):
            cell = ws.cell(row=1, column=col, value=title)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.thin_border
            ws.column_dimensions[get_column_letter(col)].width = width
        ws.row_dimensions[1].height = 25
        ws.freeze_panes = 'A2'

        status_col = [title for title, _ in DETAIL_COLUMNS].index("Status") + 1

        for index, message in enumerate(messages, start=1):
            row = index + 1
            for col, value in enumerate(self.detail_row(index, message), start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.alignment = Alignment(vertical='top', wrap_text=True)
                cell.border = self.thin_border
                if index % 2 == 1:
                    cell.fill = self.zebra_fill

            colours = STATUS_COLOURS.get(message.status)
            if colours:
                fill, font = colours
                status_cell = ws.cell(row=row, column=status_col)
                status_cell.fill = PatternFill(start_color=fill, end_color=fill, fill_type="solid")
                status_cell.font = Font(bold=True, color=font)

    def _write_summary_sheet(self, ws, summary):
        ws.sheet_properties.tabColor = "28A745"

        for col, (title, width) in enumerate([("Metric", 25), ("Value", 22), ("Percentage", 15)], start=1):
            cell = ws.cell(row=1, column=col, value=title)
            cell.font = self.header_font
            cell.fill = self.summary_fill
            ws.column_dimensions[get_column_letter(col)].width = width

        rows = [("Total Contacts", summary['total'], "100%")]
        for status, label in ContactMessage.STATUS_CHOICES:
            stats = summary['by_status'][status]
            rows.append((f"{label} Contacts", stats['count'], stats['percentage']))
        rows.append(("Generated On", self.format_date(summary['generated_at']), ""))

        for row, values in enumerate(rows, start=2):
            for col, value in enumerate(values, start=1):
                ws.cell(row=row, column=col, value=value)
