import unittest
import requests
from tests.utils import BASE_URL, server_available

class TestDashboard(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not server_available():
            raise unittest.SkipTest(f"No py4web server at {BASE_URL}")

    def setUp(self):
        self.session = requests.Session()

    def test_index_load(self):
        """Test that the index page loads successfully."""
        response = self.session.get(f"{BASE_URL}/index")
        self.assertEqual(response.status_code, 200, "Dashboard should return 200 OK")
        self.assertIn("Contrast Dashboard", response.text, "Title should be present")

    def test_populate_demo(self):
        """Demo analyses show up in the history."""
        response = self.session.post(f"{BASE_URL}/populate_demo", allow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertIn("violations", response.text)
        self.assertIn("uploads/overlay_", response.text)

    def test_clear_history(self):
        self.session.post(f"{BASE_URL}/populate_demo")
        response = self.session.post(f"{BASE_URL}/clear_history", allow_redirects=True)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.url.endswith("/index") or response.url.endswith("/contrast_site/index"))
        self.assertIn("No analyses yet", response.text)

    def test_upload_path_traversal(self):
        response = self.session.get(f"{BASE_URL}/uploads/..%5Csettings.py")
        self.assertNotEqual(response.status_code, 200)

if __name__ == '__main__':
    unittest.main()
