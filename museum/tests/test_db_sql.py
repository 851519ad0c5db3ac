import unittest

from museum.db import PaintingRecord, ScanRecord, SqlDbClient
from museum.errors import ConflictError
from museum.types import ScanType


class SqlDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL client logic.
    """

    def setUp(self):
        self.db = SqlDbClient("sqlite+pysqlite:///:memory:")

    def _painting(self, name="Starry Night", **kwargs):
        return self.db.create_painting(
            PaintingRecord(name=name, artist="Van Gogh", description="...", **kwargs)
        )

    def test_create_and_get_painting(self):
        created = self._painting(image="aGVsbG8=", image_type="image/png")
        fetched = self.db.get_painting(created.painting_id)
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.name, "Starry Night")
        self.assertEqual(fetched.image, "aGVsbG8=")
        self.assertEqual(fetched.scans, 0)
        self.assertIsNone(self.db.get_painting("missing"))

    def test_unique_name(self):
        self._painting()
        with self.assertRaises(ConflictError):
            self._painting()

    def test_search_is_case_insensitive_literal_substring(self):
        first = self._painting("Starry Night")
        self._painting("Starry Night Over the Rhone")
        self._painting("100% Abstract")

        self.assertEqual(self.db.search_painting("STARRY").painting_id, first.painting_id)
        self.assertEqual(self.db.search_painting("0% abs").name, "100% Abstract")
        self.assertIsNone(self.db.search_painting("%x%"))

    def test_update_keeps_image_when_omitted(self):
        created = self._painting(image="aGVsbG8=", image_type="image/png")
        updated = self.db.update_painting(
            created.painting_id,
            name="The Starry Night",
            artist="Vincent van Gogh",
            description="Oil on canvas",
            qr_code="data:image/png;base64,xyz",
        )
        self.assertEqual(updated.name, "The Starry Night")
        self.assertEqual(updated.image, "aGVsbG8=")
        self.assertEqual(updated.image_type, "image/png")
        self.assertGreaterEqual(updated.updated_at, created.updated_at)
        self.assertIsNone(
            self.db.update_painting(
                "missing", name="x", artist="y", description="z", qr_code="q"
            )
        )

    def test_rename_onto_existing_name_conflicts(self):
        self._painting("Sunflowers")
        created = self._painting("Starry Night")
        with self.assertRaises(ConflictError):
            self.db.update_painting(
                created.painting_id,
                name="Sunflowers",
                artist="Van Gogh",
                description="...",
                qr_code="q",
            )

    def test_increment_scans(self):
        created = self._painting()
        counts = [self.db.increment_scans(created.painting_id) for _ in range(5)]
        self.assertEqual(counts, [1, 2, 3, 4, 5])
        self.assertIsNotNone(self.db.get_painting(created.painting_id).last_scanned_at)
        self.assertIsNone(self.db.increment_scans("missing"))

    def test_delete_leaves_scans(self):
        created = self._painting()
        self.db.save_scan(
            ScanRecord(
                painting_id=created.painting_id,
                painting_name=created.name,
                scan_type=ScanType.VISION,
                viewing_time=12,
            )
        )
        self.assertTrue(self.db.delete_painting(created.painting_id))
        self.assertFalse(self.db.delete_painting(created.painting_id))

        scans = self.db.list_scans()
        self.assertEqual(len(scans), 1)
        self.assertEqual(scans[0].scan_type, ScanType.VISION)
        self.assertEqual(scans[0].viewing_time, 12)


if __name__ == "__main__":
    unittest.main()
