import unittest

from app.main import app
from app.status_service import StatusService


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Lake Status Widget")
        self.assertIsInstance(app.state.status_service, StatusService)

    def test_status_route_registered(self):
        paths = {route.path for route in app.routes}
        self.assertIn("/api/status", paths)


if __name__ == "__main__":
    unittest.main()
