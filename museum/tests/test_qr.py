import base64
import unittest

from museum.qr import DATA_URI_PREFIX, make_qr_data_uri


class QrCodeTests(unittest.TestCase):
    def test_returns_png_data_uri(self):
        uri = make_qr_data_uri("Starry Night")
        self.assertTrue(uri.startswith(DATA_URI_PREFIX))
        png = base64.b64decode(uri[len(DATA_URI_PREFIX):])
        self.assertEqual(png[:8], b"\x89PNG\r\n\x1a\n")

    def test_content_changes_image(self):
        self.assertNotEqual(make_qr_data_uri("Starry Night"), make_qr_data_uri("Sunflowers"))


if __name__ == "__main__":
    unittest.main()
