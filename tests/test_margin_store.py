# tests/test_margin_store.py

"""Tests for margin overrides."""

import json
import tempfile
import unittest
from pathlib import Path

from fuel_prices.storage.margin_store import (
    InMemoryMarginStore,
    JsonMarginStore,
    margin_key,
    parse_margin,
)


class TestMarginHelpers(unittest.TestCase):
    """Key encoding and tolerant value parsing."""

    def test_margin_key_encodes_name(self) -> None:
        self.assertEqual(margin_key("pb95"), "margin:pb95")
        self.assertEqual(margin_key("Olej napędowy"), "margin:Olej%20nap%C4%99dowy")

    def test_parse_margin(self) -> None:
        cases = {
            "15": 15,
            " -7 ": -7,
            "+3": 3,
            "12gr": 12,
            "abc": 0,
            "": 0,
            None: 0,
            True: 0,
            25: 25,
        }
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(parse_margin(value), expected)


class TestInMemoryMarginStore(unittest.TestCase):
    """Dict-backed store behaviour."""

    def test_unset_is_zero(self) -> None:
        self.assertEqual(InMemoryMarginStore().get("pb95"), 0)

    def test_initial_set_and_reset(self) -> None:
        store = InMemoryMarginStore({"pb95": 10})
        self.assertEqual(store.get("pb95"), 10)
        store.set("pb95", 25)
        self.assertEqual(store.get("pb95"), 25)
        store.reset("pb95")
        self.assertEqual(store.get("pb95"), 0)

    def test_names_are_independent(self) -> None:
        store = InMemoryMarginStore()
        store.set("pb95", 5)
        self.assertEqual(store.get("pb98"), 0)


class TestJsonMarginStore(unittest.TestCase):
    """File-backed store persists across instances."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "sub" / "margins.json"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_persists_between_instances(self) -> None:
        JsonMarginStore(self.path).set("diesel", 12)
        self.assertEqual(JsonMarginStore(self.path).get("diesel"), 12)
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {"margin:diesel": "12"})

    def test_unreadable_file_is_empty(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{broken", encoding="utf-8")
        store = JsonMarginStore(self.path)
        self.assertEqual(store.get("diesel"), 0)
        store.set("diesel", 3)
        self.assertEqual(store.get("diesel"), 3)

    def test_non_object_file_is_empty(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(JsonMarginStore(self.path).get("pb95"), 0)

    def test_default_path_under_data_dir(self) -> None:
        store = JsonMarginStore()
        self.assertEqual(store.path.name, "margins.json")


if __name__ == "__main__":
    unittest.main()
