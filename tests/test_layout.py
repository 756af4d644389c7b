import random
import unittest

from mindcanvas.layout import LayoutPolicy
from mindcanvas.store import Node, NodeStore


class TestLayoutPolicy(unittest.TestCase):

    def test_unselected_nodes_stack_down_the_canvas(self):
        layout = LayoutPolicy(random.Random(1))
        store = NodeStore()
        for count in range(4):
            x, y = layout.spawn_position(store)
            self.assertGreaterEqual(x, 50)
            self.assertLess(x, 100)
            self.assertEqual(y, 50 + count * 50)
            store.append(Node(id=count + 1, text=f"n{count}", x=x, y=y))

    def test_selected_node_spawns_to_the_right(self):
        layout = LayoutPolicy(random.Random(2))
        store = NodeStore([Node(id=1, text="Root", x=80, y=120)])
        store.select(1)
        for _ in range(20):
            x, y = layout.spawn_position(store)
            self.assertEqual(x, 230)
            self.assertGreaterEqual(y, 120)
            self.assertLess(y, 170)


if __name__ == "__main__":
    unittest.main()
