import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mindcanvas.config import CanvasSettings, load_settings, save_settings
from mindcanvas.database import Database, NodeRepository, get_data_dir
from mindcanvas.store import Node

from tests.support import make_session, sample_nodes


class DatabaseTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        patcher = mock.patch.dict(os.environ, {"MINDCANVAS_DATA_DIR": str(self.data_dir)})
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = Database(self.data_dir / "test.db")
        self.repo = NodeRepository(self.db)

    def tearDown(self):
        self.db.close()
        self._tmp.cleanup()


class TestNodeRepository(DatabaseTestCase):

    def test_missing_slot_loads_empty(self):
        self.assertEqual(self.repo.load(), [])

    def test_round_trip_is_lossless(self):
        nodes = sample_nodes() + [Node(id=5, text="Floating", x=12.75, y=-3.5)]
        self.repo.save(nodes)
        self.assertEqual(self.repo.load(), nodes)

    def test_reload_resets_selection(self):
        ops, _ = make_session(sample_nodes())
        ops.select_node(2)
        self.repo.save(ops.store)
        store = self.repo.load_store()
        self.assertIsNone(store.selected_node_id)
        self.assertEqual(store.snapshot(), ops.store.snapshot())

    def test_save_overwrites_wholesale(self):
        self.repo.save(sample_nodes())
        self.repo.save([Node(id=9, text="Only")])
        self.assertEqual([n.id for n in self.repo.load()], [9])

    def test_unparseable_data_loads_empty(self):
        for raw in ["{not json", "42", '{"id": 1}', "null"]:
            self.db.set_raw("nodes", raw)
            self.assertEqual(self.repo.load(), [])

    def test_malformed_records_are_skipped(self):
        records = [
            {"id": 1, "text": "Good", "x": 0, "y": 0, "parentId": None},
            {"id": 2, "text": "Missing coords"},
            "junk",
            {"id": 1, "text": "Duplicate", "x": 0, "y": 0, "parentId": None},
            {"id": 3, "text": "Also good", "x": 1, "y": 2, "parentId": 1},
        ]
        self.db.set_raw("nodes", json.dumps(records))
        self.assertEqual([n.id for n in self.repo.load()], [1, 3])

    def test_data_survives_reopening(self):
        self.repo.save(sample_nodes())
        self.db.close()
        reopened = Database(self.data_dir / "test.db")
        try:
            self.assertEqual(NodeRepository(reopened).load(), sample_nodes())
        finally:
            reopened.close()

    def test_backups_keep_newest(self):
        self.assertIsNone(self.repo.create_backup())
        self.repo.save(sample_nodes())
        backup_dir = get_data_dir() / "backups"
        for i in range(3):
            (backup_dir / f"nodes_2000010{i}_000000.json").write_text("[]", encoding="utf-8")
        backup = self.repo.create_backup(backup_count=2)
        self.assertTrue(backup.exists())
        self.assertEqual(json.loads(backup.read_text(encoding="utf-8"))[0]["text"], "Root")
        self.assertEqual(len(list(backup_dir.glob("nodes_*.json"))), 2)

    def test_backups_sit_next_to_the_database_file(self):
        with tempfile.TemporaryDirectory() as other:
            db = Database(Path(other) / "custom.db")
            try:
                repo = NodeRepository(db)
                repo.save(sample_nodes())
                backup = repo.create_backup()
                self.assertEqual(backup.parent, Path(other) / "backups")
                self.assertEqual(list((self.data_dir / "backups").glob("nodes_*.json")), [])
            finally:
                db.close()

    def test_rapid_backups_do_not_overwrite(self):
        self.repo.save(sample_nodes())
        first = self.repo.create_backup(backup_count=5)
        second = self.repo.create_backup(backup_count=5)
        self.assertNotEqual(first, second)
        self.assertEqual(len(list(first.parent.glob("nodes_*.json"))), 2)


class TestSettings(DatabaseTestCase):

    def test_setting_round_trip(self):
        self.assertEqual(self.db.get_setting("missing", 5), 5)
        self.db.set_setting("autosave", {"on": True})
        self.assertEqual(self.db.get_setting("autosave"), {"on": True})
        self.db.delete_setting("autosave")
        self.assertIsNone(self.db.get_setting("autosave"))

    def test_canvas_settings_defaults_and_persistence(self):
        self.assertEqual(load_settings(self.db), CanvasSettings())
        save_settings(self.db, CanvasSettings(show_grid=False, backup_count=3))
        settings = load_settings(self.db)
        self.assertFalse(settings.show_grid)
        self.assertEqual(settings.backup_count, 3)

    def test_canvas_settings_tolerate_bad_data(self):
        self.assertEqual(CanvasSettings.from_json("{oops"), CanvasSettings())
        self.assertEqual(CanvasSettings.from_json("[1, 2]"), CanvasSettings())
        settings = CanvasSettings.from_json('{"grid_size": 40, "retired_option": 1}')
        self.assertEqual(settings.grid_size, 40)

    def test_data_dir_override(self):
        self.assertEqual(get_data_dir(), self.data_dir)
        self.assertTrue((self.data_dir / "exports").is_dir())


if __name__ == "__main__":
    unittest.main()
