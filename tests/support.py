"""Shared fixtures for the MindCanvas tests."""

import random
import sqlite3
from typing import List

from mindcanvas.layout import LayoutPolicy
from mindcanvas.operations import GraphOperations
from mindcanvas.renderer import Renderer
from mindcanvas.store import Node, NodeStore


class RecordingPersistence:
    """Keeps a copy of every saved node sequence."""

    def __init__(self):
        self.saves: List[list] = []

    def save(self, nodes):
        self.saves.append([node.to_record() for node in nodes])

    @property
    def last(self):
        return self.saves[-1] if self.saves else None


class FailingPersistence:
    """Raises the way a locked or read-only database does."""

    def __init__(self):
        self.attempts = 0

    def save(self, nodes):
        self.attempts += 1
        raise sqlite3.OperationalError("database is locked")


def make_session(nodes=None, seed: int = 7):
    """Build a GraphOperations session over an in-memory store."""
    store = NodeStore(nodes or [])
    persistence = RecordingPersistence()
    ops = GraphOperations(store, LayoutPolicy(random.Random(seed)), Renderer(), persistence)
    return ops, persistence


def sample_nodes():
    return [
        Node(id=1, text="Root", x=50, y=50),
        Node(id=2, text="Child A", x=200, y=60, parent_id=1),
        Node(id=3, text="Child B", x=200, y=90, parent_id=1),
        Node(id=4, text="Grandchild", x=350, y=70, parent_id=2),
    ]
