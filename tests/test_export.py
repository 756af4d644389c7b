import json
import os
import tempfile
import unittest

from mindcanvas.export import MindMapExporter, export_json
from mindcanvas.renderer import Renderer
from mindcanvas.store import NodeStore

from tests.support import sample_nodes

try:
    import cairo  # noqa: F401
    HAVE_CAIRO = True
except ImportError:
    HAVE_CAIRO = False


class TestJsonExport(unittest.TestCase):

    def test_pretty_printed_with_stable_field_order(self):
        text = export_json(sample_nodes()[:2])
        self.assertIn('\n  {\n    "id": 1,\n    "text": "Root",', text)
        data = json.loads(text)
        self.assertEqual([list(r) for r in data], [["id", "text", "x", "y", "parentId"]] * 2)
        self.assertEqual(data[1]["parentId"], 1)

    def test_empty_map(self):
        self.assertEqual(json.loads(export_json([])), [])

    def test_export_file(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "mindmap.json")
            self.assertTrue(MindMapExporter().export_json_file(sample_nodes(), path))
            with open(path, encoding="utf-8") as f:
                self.assertEqual(len(json.load(f)), 4)


@unittest.skipUnless(HAVE_CAIRO, "pycairo not available")
class TestPngExport(unittest.TestCase):

    def test_png_written_for_scene(self):
        renderer = Renderer()
        renderer.rebuild(NodeStore(sample_nodes()))
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "mindmap.png")
            self.assertTrue(MindMapExporter().export_png(renderer, path))
            with open(path, "rb") as f:
                self.assertEqual(f.read(8), b"\x89PNG\r\n\x1a\n")

    def test_empty_scene_is_not_exported(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "empty.png")
            self.assertFalse(MindMapExporter().export_png(Renderer(), path))
            self.assertFalse(os.path.exists(path))


if __name__ == "__main__":
    unittest.main()
