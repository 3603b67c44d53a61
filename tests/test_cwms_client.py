import datetime as dt
import unittest

import requests

from app.data_sources.cwms_client import CwmsClient, SkippedRow, build_point, decode_row, last_two
from app.errors import (
    InsufficientDataError,
    ParseError,
    TransportError,
    UnexpectedValueTypeError,
    UnsupportedTypeError,
)
from tests.fakes import DummyResp, FakeSession

BASE = "https://cwms.example/cwms-data"
T0 = 1714550400000  # 2024-05-01T08:00Z
HOUR_MS = 3_600_000


def _ts(n: int) -> int:
    return T0 + n * HOUR_MS


class TestLastTwo(unittest.TestCase):
    def test_skips_malformed_row_and_never_reaches_oldest(self):
        values = [[_ts(0), 5.0], [_ts(1), "bad"], [_ts(2), 6.2], [_ts(3), 6.5]]
        trend = last_two(values, "lake")
        self.assertEqual(trend.current.value, 6.5)
        self.assertEqual(trend.current.instant_utc, dt.datetime(2024, 5, 1, 11, tzinfo=dt.timezone.utc))
        self.assertEqual(trend.previous.value, 6.2)
        self.assertEqual(trend.previous.instant_utc, dt.datetime(2024, 5, 1, 10, tzinfo=dt.timezone.utc))

    def test_malformed_rows_between_samples(self):
        values = [[_ts(0), 5.0], None, [_ts(1)], [_ts(2), None, 0], [_ts(3), 6.5, 0], "junk"]
        trend = last_two(values, "lake")
        self.assertEqual(trend.current.value, 6.5)
        self.assertEqual(trend.previous.value, 5.0)
        self.assertEqual(trend.delta, 1.5)

    def test_oldest_row_not_decoded_once_two_found(self):
        # an undecodable timestamp in the oldest row is never looked at
        values = [[{"bad": "ts"}, 1.0], [_ts(2), 6.2], [_ts(3), 6.5]]
        trend = last_two(values, "lake")
        self.assertEqual(trend.previous.value, 6.2)

    def test_fewer_than_two_rows(self):
        for values in ([], [[_ts(0), 5.0]]):
            with self.subTest(values=values):
                with self.assertRaises(InsufficientDataError):
                    last_two(values, "lake")

    def test_only_one_well_formed_row(self):
        values = [[_ts(0), None], [_ts(1), "n/a"], [_ts(2), 6.2]]
        with self.assertRaises(InsufficientDataError):
            last_two(values, "lake")

    def test_bad_timestamp_on_numeric_row_is_fatal(self):
        with self.assertRaises(UnsupportedTypeError):
            last_two([[_ts(0), 5.0], [None, 6.5]], "lake")
        with self.assertRaises(ParseError):
            last_two([[_ts(0), 5.0], ["not-a-date", 6.5]], "lake")

    def test_iso_timestamps_and_labels(self):
        values = [["2024-05-01T10:00:00Z", 659.80], ["2024-05-01T11:00:00Z", 659.82]]
        trend = last_two(values, "lake")
        self.assertEqual(trend.current.local_time_label, "2024-05-01 06:00 -05:00")
        self.assertEqual(trend.delta, 0.02)

    def test_descending_feed_breaks_trend_ordering(self):
        values = [[_ts(3), 6.5], [_ts(2), 6.2]]
        with self.assertRaises(ParseError):
            last_two(values, "lake")


class TestDecodeRow(unittest.TestCase):
    def test_boolean_value_is_skipped(self):
        result = decode_row(4, [_ts(0), True])
        self.assertIsInstance(result, SkippedRow)
        self.assertEqual(result.index, 4)

    def test_integer_value_becomes_float(self):
        result = decode_row(0, [_ts(0), 660])
        self.assertEqual(result.value, 660.0)
        self.assertIsInstance(result.value, float)

    def test_build_point_rejects_non_numeric_value(self):
        with self.assertRaises(UnexpectedValueTypeError):
            build_point([_ts(0), "659.8"])


class TestCwmsClient(unittest.TestCase):
    def _client(self, response):
        session = FakeSession({f"{BASE}/timeseries": response})
        return CwmsClient(BASE + "/", session=session, timeout=3), session

    def test_fetch_trend_builds_query_window(self):
        payload = {"values": [[_ts(2), 6.2, 0], [_ts(3), 6.5, 0]]}
        client, session = self._client(DummyResp(payload))
        now = dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc)

        trend = client.fetch_trend("SWL", "Lake.Elev", "ft", now=now)

        self.assertEqual(trend.current.value, 6.5)
        url, params, timeout = session.calls[0]
        self.assertEqual(url, f"{BASE}/timeseries")
        self.assertEqual(timeout, 3)
        self.assertEqual(params["office"], "SWL")
        self.assertEqual(params["name"], "Lake.Elev")
        self.assertEqual(params["unit"], "ft")
        self.assertEqual(params["begin"], "2024-05-01T00:00:00+00:00")
        self.assertEqual(params["end"], "2024-05-01T12:00:00+00:00")
        self.assertEqual(session.headers["Accept"], "application/json")

    def test_http_error_becomes_transport_error(self):
        client, _ = self._client(DummyResp({}, status_code=503))
        with self.assertRaises(TransportError) as ctx:
            client.fetch_trend("SWL", "Lake.Elev", "ft")
        self.assertEqual(ctx.exception.context["status"], 503)

    def test_network_error_becomes_transport_error(self):
        client, _ = self._client(requests.ConnectionError("refused"))
        with self.assertRaises(TransportError):
            client.fetch_trend("SWL", "Lake.Elev", "ft")

    def test_missing_values_array(self):
        client, _ = self._client(DummyResp({"name": "Lake.Elev"}))
        with self.assertRaises(ParseError):
            client.fetch_trend("SWL", "Lake.Elev", "ft")

    def test_non_json_body(self):
        client, _ = self._client(DummyResp(None, json_error=True))
        with self.assertRaises(ParseError):
            client.fetch_trend("SWL", "Lake.Elev", "ft")


if __name__ == "__main__":
    unittest.main()
