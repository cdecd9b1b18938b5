"""
Tests for the contact spreadsheet export.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from io import BytesIO
from unittest.mock import MagicMock

import openpyxl
import pytest

from contact.exceptions import PersistenceError, ReportError
from contact.models import ContactMessage
from contact.reports import (
    ContactReportBuilder,
    build_summary,
    format_percentage,
    get_report_filename,
)


def load(content):
    return openpyxl.load_workbook(BytesIO(content))


def make_message(name, status=ContactMessage.STATUS_NEW, minutes=0, **extra):
    return ContactMessage(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        message='A message long enough to store.',
        status=status,
        ip_address='127.0.0.1',
        created_at=datetime(2024, 3, 5, 9, 0, tzinfo=dt_timezone.utc) + timedelta(minutes=minutes),
        **extra
    )


class TestPercentages:

    @pytest.mark.parametrize('count, total, expected', [
        (0, 0, '0%'),
        (1, 1, '100%'),
        (1, 2, '50%'),
        (1, 3, '33%'),
        (2, 3, '67%'),
        (1, 8, '13%'),  # 12.5 rounds up
        (3, 8, '38%'),  # 37.5 rounds up
    ])
    def test_round_half_up(self, count, total, expected):
        assert format_percentage(count, total) == expected

    def test_summary_counts_every_status(self):
        messages = [
            make_message('Ann Lee'),
            make_message('Bob Ray', ContactMessage.STATUS_READ),
            make_message('Cy Two', ContactMessage.STATUS_READ),
            make_message('Di Four', ContactMessage.STATUS_ARCHIVED),
        ]

        summary = build_summary(messages)

        assert summary['total'] == 4
        assert summary['by_status'] == {
            'new': {'count': 1, 'percentage': '25%'},
            'read': {'count': 2, 'percentage': '50%'},
            'replied': {'count': 0, 'percentage': '0%'},
            'archived': {'count': 1, 'percentage': '25%'},
        }

    def test_empty_summary(self):
        summary = build_summary([])

        assert summary['total'] == 0
        assert all(s == {'count': 0, 'percentage': '0%'} for s in summary['by_status'].values())


class TestReportBuilder:

    def build(self, messages):
        store = MagicMock()
        store.list_all_by_recency.return_value = messages
        return load(ContactReportBuilder(store=store).build())

    def test_sheets(self):
        wb = self.build([])

        assert wb.sheetnames == ['Contact Submissions', 'Summary']

    def test_rows_follow_store_order(self):
        newest = make_message('Newer Person', minutes=10)
        older = make_message('Older Person', ContactMessage.STATUS_REPLIED)

        ws = self.build([newest, older])['Contact Submissions']

        assert ws.cell(row=1, column=1).value == 'Sr. No.'
        assert ws.max_row == 3
        assert [ws.cell(row=r, column=3).value for r in (2, 3)] == ['Newer Person', 'Older Person']
        assert [ws.cell(row=r, column=1).value for r in (2, 3)] == [1, 2]
        assert ws.cell(row=3, column=8).value == 'REPLIED'
        assert ws.cell(row=2, column=10).value == str(newest.id)

    def test_missing_optional_fields(self):
        ws = self.build([make_message('Ann Lee')])['Contact Submissions']

        assert ws.cell(row=2, column=5).value == 'Not provided'
        assert ws.cell(row=2, column=6).value == 'Not provided'

    def test_optional_fields_present(self):
        message = make_message(
            'Ann Lee', phone='+919876543210', linkedin_profile='https://linkedin.com/in/ann'
        )

        ws = self.build([message])['Contact Submissions']

        assert ws.cell(row=2, column=5).value == '+919876543210'
        assert ws.cell(row=2, column=6).value == 'https://linkedin.com/in/ann'

    def test_dates_use_report_time_zone(self, settings):
        settings.CONTACT_REPORT_TIME_ZONE = 'Asia/Kolkata'

        ws = self.build([make_message('Ann Lee')])['Contact Submissions']

        # 09:00 UTC is 14:30 IST
        assert ws.cell(row=2, column=2).value == '05 Mar 2024, 02:30 PM'

    def test_summary_sheet(self):
        ws = self.build([
            make_message('Ann Lee'),
            make_message('Bob Ray'),
            make_message('Cy Two', ContactMessage.STATUS_REPLIED),
        ])['Summary']

        rows = {
            ws.cell(row=r, column=1).value: (ws.cell(row=r, column=2).value, ws.cell(row=r, column=3).value)
            for r in range(2, ws.max_row + 1)
        }
        assert rows['Total Contacts'] == (3, '100%')
        assert rows['New Contacts'] == (2, '67%')
        assert rows['Read Contacts'] == (0, '0%')
        assert rows['Replied Contacts'] == (1, '33%')
        assert rows['Archived Contacts'] == (0, '0%')
        assert 'Generated On' in rows

    def test_store_failure_raises_report_error(self):
        store = MagicMock()
        store.list_all_by_recency.side_effect = PersistenceError('gone')

        with pytest.raises(ReportError):
            ContactReportBuilder(store=store).build()

    def test_unknown_time_zone_raises_report_error(self, settings):
        settings.CONTACT_REPORT_TIME_ZONE = 'Mars/Olympus_Mons'
        store = MagicMock()
        store.list_all_by_recency.return_value = [make_message('Ann Lee')]

        builder = ContactReportBuilder(store=store)

        with pytest.raises(ReportError):
            builder.build()

    @pytest.mark.django_db
    def test_reads_from_database(self, sample_contact_message):
        content = ContactReportBuilder().build()

        ws = load(content)['Contact Submissions']
        assert ws.cell(row=2, column=4).value == 'john@example.com'


def test_report_filename():
    assert get_report_filename(datetime(2024, 1, 31, 23, 0)) == 'contact-database-2024-01-31.xlsx'
