import threading
import unittest

from museum.db import InMemoryDbClient, PaintingRecord
from museum.errors import ConflictError, NotFoundError, ValidationError
from museum.paintings import PaintingService
from museum.types import ScanType


class PaintingServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.service = PaintingService(self.db)
        self.painting = self.service.add_painting(
            " Starry Night ", "Van Gogh", "Swirling sky."
        )

    def test_add_trims_and_starts_at_zero(self):
        self.assertEqual(self.painting.name, "Starry Night")
        self.assertEqual(self.painting.scans, 0)
        self.assertTrue(self.painting.qr_code.startswith("data:image/png;base64,"))

    def test_add_validation(self):
        for args in (("", "A", "B"), ("A", "  ", "B"), ("A", "B", None)):
            with self.assertRaises(ValidationError):
                self.service.add_painting(*args)
        with self.assertRaises(ConflictError):
            self.service.add_painting("Starry Night", "Someone", "Copy")

    def test_rename_onto_existing_conflicts(self):
        other = self.service.add_painting("Sunflowers", "Van Gogh", "Yellow.")
        with self.assertRaises(ConflictError):
            self.service.edit_painting(other.painting_id, "Starry Night", "Van Gogh", "Yellow.")

    def test_edit_regenerates_qr_code(self):
        edited = self.service.edit_painting(
            self.painting.painting_id, "The Starry Night", "Van Gogh", "Swirling sky."
        )
        self.assertNotEqual(edited.qr_code, self.painting.qr_code)

    def test_missing_painting(self):
        with self.assertRaises(NotFoundError):
            self.service.get_painting_by_id("missing")
        with self.assertRaises(NotFoundError):
            self.service.delete_painting("missing")
        with self.assertRaises(NotFoundError):
            self.service.log_scan("missing")

    def test_concurrent_log_scan_loses_no_increment(self):
        def scan_many():
            for _ in range(50):
                self.service.log_scan(self.painting.painting_id)

        threads = [threading.Thread(target=scan_many) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(self.service.get_painting_by_id(self.painting.painting_id).scans, 400)

    def test_reads_while_paintings_are_added(self):
        errors = []
        done = threading.Event()

        def read_until_done():
            while not done.is_set():
                try:
                    self.db.list_paintings()
                    self.db.get_painting_by_name("Guernica")
                    self.db.search_painting("night")
                except Exception as exc:
                    errors.append(repr(exc))
                    return

        readers = [threading.Thread(target=read_until_done) for _ in range(4)]
        for reader in readers:
            reader.start()
        try:
            for i in range(2000):
                self.db.create_painting(
                    PaintingRecord(name=f"Study {i}", artist="Anon", description="...")
                )
        finally:
            done.set()
            for reader in readers:
                reader.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.db.list_paintings()), 2001)

    def test_track_scan_resolves_identifier_or_name(self):
        by_id = self.service.track_scan(self.painting.painting_id, "image", 30)
        by_name = self.service.track_scan("Starry Night", "vision", location="Hall B")
        for scan in (by_id, by_name):
            self.assertEqual(scan.painting_id, self.painting.painting_id)
            self.assertEqual(scan.painting_name, "Starry Night")
        self.assertEqual(by_id.scan_type, ScanType.IMAGE)
        self.assertEqual(by_id.viewing_time, 30)
        self.assertEqual(by_name.viewing_time, 0)
        self.assertEqual(by_name.location, "Hall B")

    def test_track_scan_leaves_counter_alone(self):
        self.service.track_scan(self.painting.painting_id, "qr")
        self.assertEqual(self.service.get_painting_by_id(self.painting.painting_id).scans, 0)


if __name__ == "__main__":
    unittest.main()
