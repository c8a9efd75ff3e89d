"""
Date and sanitizer helper tests
"""
from datetime import date, datetime, timedelta, timezone

from utils.dates import parse_date, to_iso_date, is_iso_date, period_bounds
from utils.sanitizer import DataSanitizer


class TestDates:

    def test_parse_variants(self) -> None:
        assert parse_date("2025-03-01") == datetime(2025, 3, 1)
        assert parse_date("2025-03-01T10:15:00Z") == datetime(2025, 3, 1, 10, 15)
        assert parse_date(date(2025, 3, 1)) == datetime(2025, 3, 1)
        assert parse_date("03/01/2025") is None
        assert parse_date("") is None
        assert parse_date(None) is None

    def test_offsets_convert_to_utc(self) -> None:
        assert parse_date("2024-01-01T23:00:00-05:00") == datetime(2024, 1, 2, 4, 0)
        aware = datetime(2024, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=4, minutes=30)))
        assert parse_date(aware) == datetime(2024, 1, 1, 3, 30)
        assert to_iso_date("2024-01-01T23:00:00-05:00") == "2024-01-02"

    def test_to_iso_date(self) -> None:
        assert to_iso_date(datetime(2025, 3, 1, 23, 59)) == "2025-03-01"
        assert to_iso_date("bad") is None

    def test_is_iso_date(self) -> None:
        assert is_iso_date("2025-12-31")
        assert not is_iso_date("2025-13-01")
        assert not is_iso_date(None)

    def test_is_iso_date_rejects_other_iso_forms(self) -> None:
        assert not is_iso_date("20240115")
        assert not is_iso_date("2024-W03-1")
        assert not is_iso_date("2024-01-15T00:00:00")
        assert not is_iso_date("2024-01-15\n")

    def test_period_bounds(self) -> None:
        assert period_bounds("thisMonth", date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
        assert period_bounds("lastMonth", date(2025, 1, 5)) == (date(2024, 12, 1), date(2024, 12, 31))
        assert period_bounds("thisYear", date(2025, 6, 1)) == (date(2025, 1, 1), date(2025, 12, 31))
        assert period_bounds("someday", date(2025, 6, 1)) is None


class TestDataSanitizer:

    def test_masks_phone_fields(self) -> None:
        data = DataSanitizer.sanitize_dict({"phone": "0791234567", "amount": 800})
        assert data == {"phone": "*******567", "amount": 800}

    def test_masks_phone_in_text(self) -> None:
        text = DataSanitizer.sanitize_string("Call 0791 234 567 about order 12")
        assert "0791" not in text
        assert text.endswith("about order 12")

    def test_to_json_empty(self) -> None:
        assert DataSanitizer.to_json(None) is None
