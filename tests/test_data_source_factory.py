import unittest

from app.config import Settings
from app.data_sources.cwms_client import CwmsClient
from app.data_sources.factory import build_data_sources
from app.data_sources.nws_client import NwsClient


class TestDataSourceFactory(unittest.TestCase):
    def test_builds_clients_from_settings(self):
        settings = Settings(
            cwms_base_url="http://cwms.example/",
            nws_base_url="http://nws.example",
            nws_user_agent="UnitTest/0.1",
            http_timeout_seconds=4,
            local_timezone="America/Denver",
        )
        telemetry, weather = build_data_sources(settings)

        self.assertIsInstance(telemetry, CwmsClient)
        self.assertEqual(telemetry.base_url, "http://cwms.example")
        self.assertEqual(telemetry.timeout, 4)
        self.assertEqual(telemetry.tz_name, "America/Denver")

        self.assertIsInstance(weather, NwsClient)
        self.assertEqual(weather.base_url, "http://nws.example")
        self.assertEqual(weather.session.headers["User-Agent"], "UnitTest/0.1")

    def test_clients_do_not_share_sessions(self):
        telemetry, weather = build_data_sources(Settings())
        self.assertIsNot(telemetry.session, weather.session)
        self.assertEqual(telemetry.session.headers["Accept"], "application/json")
        self.assertEqual(weather.session.headers["Accept"], "application/geo+json")


if __name__ == "__main__":
    unittest.main()
