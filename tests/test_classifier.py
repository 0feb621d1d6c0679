"""
Tests for call classification: result-code vocabularies, inbound filtering
and the after-hours rule
"""

from datetime import datetime, timezone

import pytest

from call_diagnostic.analysis.aggregator import aggregate
from call_diagnostic.analysis.classifier import BusinessHours, classify_calls
from call_diagnostic.analysis.models import UNKNOWN_CALLER
from call_diagnostic.providers.base import parse_timestamp
from call_diagnostic.providers.ringcentral import RingCentralAdapter
from call_diagnostic.providers.zoom import ZoomPhoneAdapter

from conftest import BASE_TIME, rc_record, zoom_record


class TestRingCentralAdapter:

    @pytest.mark.parametrize("code", [
        "Missed", "Voicemail", "Abandoned", "Declined", "Busy", "Rejected", "No Answer"
    ])
    def test_missed_codes(self, code):
        adapter = RingCentralAdapter()
        assert adapter.is_missed(code)
        assert not adapter.is_accepted(code)

    @pytest.mark.parametrize("code", ["Accepted", "Call accepted", "Call connected"])
    def test_accepted_codes(self, code):
        adapter = RingCentralAdapter()
        assert adapter.is_accepted(code)
        assert not adapter.is_missed(code)

    @pytest.mark.parametrize("code", ["Unknown", "Hang Up", "", None])
    def test_ambiguous_codes_are_neither(self, code):
        adapter = RingCentralAdapter()
        assert not adapter.is_missed(code)
        assert not adapter.is_accepted(code)

    def test_normalize_reads_caller_from_party(self):
        record = RingCentralAdapter().normalize(rc_record("Missed", number="+15550001111"))
        assert record.caller_number == "+15550001111"
        assert record.start_time == BASE_TIME
        assert record.is_inbound

    def test_missing_caller_uses_sentinel(self):
        record = RingCentralAdapter().normalize(rc_record("Missed", number=None))
        assert record.caller_number == UNKNOWN_CALLER


class TestZoomPhoneAdapter:

    @pytest.mark.parametrize("code", [
        "Missed", "Voicemail", "Declined", "Busy", "Not Answered", "Call Missed"
    ])
    def test_missed_codes(self, code):
        adapter = ZoomPhoneAdapter()
        assert adapter.is_missed(code)
        assert not adapter.is_accepted(code)

    @pytest.mark.parametrize("code", ["Call connected", "Answered"])
    def test_accepted_codes(self, code):
        adapter = ZoomPhoneAdapter()
        assert adapter.is_accepted(code)
        assert not adapter.is_missed(code)

    def test_not_answered_is_not_accepted(self):
        assert not ZoomPhoneAdapter().is_accepted("Not Answered")

    def test_ambiguous_code(self):
        adapter = ZoomPhoneAdapter()
        assert not adapter.is_missed("Blocked")
        assert not adapter.is_accepted("Blocked")

    def test_normalize(self):
        record = ZoomPhoneAdapter().normalize(zoom_record("Missed", number=None, duration=12))
        assert record.caller_number == UNKNOWN_CALLER
        assert record.start_time == BASE_TIME
        assert record.duration_seconds == 12


class TestBusinessHours:

    @pytest.mark.parametrize("moment, expected", [
        (datetime(2026, 10, 14, 15, 0, tzinfo=timezone.utc), False),   # Wed 11:00 ET
        (datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc), False),   # Wed 08:00 ET
        (datetime(2026, 10, 14, 11, 59, tzinfo=timezone.utc), True),   # Wed 07:59 ET
        (datetime(2026, 10, 14, 21, 59, tzinfo=timezone.utc), False),  # Wed 17:59 ET
        (datetime(2026, 10, 14, 22, 0, tzinfo=timezone.utc), True),    # Wed 18:00 ET
        (datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc), True),    # Sat 11:00 ET
        (datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc), True),    # Sun 11:00 ET
        (datetime(2026, 10, 15, 2, 0, tzinfo=timezone.utc), True),     # Wed 22:00 ET
    ])
    def test_default_eastern_rule(self, moment, expected):
        assert BusinessHours().is_after_hours(moment) is expected

    def test_utc_saturday_that_is_friday_in_eastern(self):
        # Sat 01:00 UTC is Fri 21:00 ET: after hours because of the hour, not the day
        moment = datetime(2026, 10, 17, 1, 0, tzinfo=timezone.utc)
        assert BusinessHours().is_after_hours(moment)
        # Sat 01:00 UTC in Honolulu is Fri 15:00: open
        assert not BusinessHours('Pacific/Honolulu').is_after_hours(moment)

    def test_timezone_is_injectable(self):
        moment = datetime(2026, 10, 14, 14, 59, tzinfo=timezone.utc)
        assert not BusinessHours('America/New_York').is_after_hours(moment)
        assert BusinessHours('America/Los_Angeles').is_after_hours(moment)

    def test_winter_offset(self):
        # EST (UTC-5) applies after the November DST change
        moment = datetime(2026, 12, 2, 12, 30, tzinfo=timezone.utc)  # Wed 07:30 EST
        assert BusinessHours().is_after_hours(moment)

    def test_naive_times_are_utc(self):
        assert not BusinessHours().is_after_hours(datetime(2026, 10, 14, 15, 0))

    def test_missing_time_is_not_after_hours(self):
        assert BusinessHours().is_after_hours(None) is False

    def test_custom_hours(self):
        hours = BusinessHours(start_hour=7, end_hour=20)
        assert not hours.is_after_hours(datetime(2026, 10, 14, 11, 30, tzinfo=timezone.utc))

    def test_invalid_hours(self):
        with pytest.raises(ValueError):
            BusinessHours(start_hour=18, end_hour=8)


class TestClassifyCalls:

    def test_only_inbound_records_are_kept(self):
        records = [
            rc_record("Missed"),
            rc_record("Call connected", direction="Outbound"),
            rc_record("Call connected"),
        ]
        calls = classify_calls(records, RingCentralAdapter())
        assert len(calls) == 2
        assert [c.is_missed for c in calls] == [True, False]
        assert [c.is_accepted for c in calls] == [False, True]

    def test_zoom_direction_is_lower_case(self):
        records = [zoom_record("Missed"), zoom_record("Missed", direction="outbound")]
        assert len(classify_calls(records, ZoomPhoneAdapter())) == 1

    def test_flags_are_stable_across_runs(self):
        records = [
            rc_record("Voicemail", start=datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc)),
            rc_record("Accepted"),
            rc_record("Unknown"),
        ]
        adapter = RingCentralAdapter()
        first = classify_calls(records, adapter)
        second = classify_calls(records, adapter)
        assert first == second
        assert first[0].is_after_hours and first[0].is_missed

    def test_unparseable_timestamp_is_kept(self):
        record = rc_record("Missed")
        record['startTime'] = 'not-a-time'
        calls = classify_calls([record], RingCentralAdapter())
        assert len(calls) == 1
        assert calls[0].start_time is None
        assert not calls[0].is_after_hours

    def test_mixed_offset_and_offsetless_timestamps(self):
        missed = zoom_record("Missed", number="+15551112222")
        missed['date_time'] = '2026-10-14T15:00:00Z'
        connected = zoom_record("Call connected", number="+15551112222")
        connected['date_time'] = '2026-10-14T15:47:00'

        calls = classify_calls([missed, connected], ZoomPhoneAdapter())
        result = aggregate(calls, 1000, provider="Zoom Phone", now=BASE_TIME)

        assert all(c.start_time.tzinfo is not None for c in calls)
        assert result.avg_callback_time_minutes == 47


class TestParseTimestamp:

    @pytest.mark.parametrize("value", [
        '2026-10-14T15:00:00Z',
        '2026-10-14T15:00:00.000Z',
        '2026-10-14T15:00:00',
        '2026-10-14T11:00:00-04:00',
    ])
    def test_always_timezone_aware(self, value):
        assert parse_timestamp(value) == BASE_TIME

    @pytest.mark.parametrize("value", [None, '', 'yesterday', 12345])
    def test_unusable_values(self, value):
        assert parse_timestamp(value) is None
