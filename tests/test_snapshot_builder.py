# tests/test_snapshot_builder.py

"""Tests for snapshot building and change detection."""

import unittest

from helpers import SOURCE, fixture_html, make_snapshot

from fuel_prices.models.migration import migrate_snapshot
from fuel_prices.models.price_entry import PriceEntry
from fuel_prices.models.snapshot import Snapshot
from fuel_prices.parsing.table_extractor import extract_rows
from fuel_prices.services.snapshot_builder import (
    build_snapshot,
    prices_equal,
    snapshots_equal,
)

STAMP = "2026-10-16T06:00:00.000Z"


class TestBuildSnapshotCanonical(unittest.TestCase):
    """Canonical key mode."""

    def setUp(self) -> None:
        self.snap = build_snapshot(
            extract_rows(fixture_html()), SOURCE, STAMP, key_mode="canonical"
        )

    def test_all_canonical_keys_present(self) -> None:
        self.assertEqual(
            list(self.snap.prices),
            ["pb95", "pb98", "diesel", "heating_oil", "lpg"],
        )

    def test_fixture_values(self) -> None:
        raws = self.snap.values("raw")
        self.assertEqual(raws["pb95"], 4448.0)
        self.assertEqual(raws["pb98"], 4912.0)
        self.assertEqual(raws["diesel"], 4655.0)
        self.assertEqual(raws["heating_oil"], 3801.0)

    def test_missing_fuel_is_null_not_zero(self) -> None:
        """LPG is only in the second table, so it stays unknown."""
        self.assertIsNone(self.snap.prices["lpg"].raw)
        self.assertIsNone(self.snap.prices["lpg"].gross)

    def test_example_row(self) -> None:
        """["PB95", "4 448,00"] -> raw 4448 -> 4.448 -> ~5.47104."""
        snap = build_snapshot([["PB95", "4 448,00"]], SOURCE, STAMP)
        entry = snap.prices["pb95"]
        self.assertEqual(entry.raw, 4448.0)
        self.assertAlmostEqual(entry.per_liter, 4.448, delta=1e-6)
        self.assertAlmostEqual(entry.gross, 5.47104, delta=1e-6)

    def test_first_match_wins(self) -> None:
        rows = [["Pb95", "4 448,00"], ["Pb95 premium", "4 999,00"]]
        snap = build_snapshot(rows, SOURCE, STAMP)
        self.assertEqual(snap.prices["pb95"].raw, 4448.0)

    def test_later_row_fills_unresolved_key(self) -> None:
        """An unresolved first match does not block a later price."""
        rows = [["Pb95", "brak"], ["Pb95", "4 448,00"]]
        snap = build_snapshot(rows, SOURCE, STAMP)
        self.assertEqual(snap.prices["pb95"].raw, 4448.0)

    def test_metadata(self) -> None:
        self.assertEqual(self.snap.source, SOURCE)
        self.assertEqual(self.snap.fetched_at, STAMP)
        self.assertEqual(self.snap.key_mode, "canonical")


class TestBuildSnapshotVerbatim(unittest.TestCase):
    """Verbatim key mode."""

    def test_scraped_names_as_keys(self) -> None:
        snap = build_snapshot(
            extract_rows(fixture_html()), SOURCE, STAMP, key_mode="verbatim"
        )
        self.assertEqual(
            list(snap.prices),
            [
                "Benzyna bezołowiowa Pb95",
                "Benzyna bezołowiowa Pb98",
                "Olej napędowy ON",
                "Olej opałowy lekki",
            ],
        )
        self.assertEqual(snap.key_mode, "verbatim")

    def test_ambiguous_row_kept_as_null(self) -> None:
        snap = build_snapshot(
            [["ON", "4448", "4512"]], SOURCE, STAMP, key_mode="verbatim"
        )
        self.assertIsNone(snap.prices["ON"].raw)

    def test_later_row_fills_ambiguous_name(self) -> None:
        rows = [["ON", "4448", "4512"], ["ON", "4 448,00"]]
        snap = build_snapshot(rows, SOURCE, STAMP, key_mode="verbatim")
        self.assertEqual(snap.prices["ON"].raw, 4448.0)

    def test_first_resolved_name_wins(self) -> None:
        rows = [["ON", "4 448,00"], ["ON", "4 999,00"]]
        snap = build_snapshot(rows, SOURCE, STAMP, key_mode="verbatim")
        self.assertEqual(snap.prices["ON"].raw, 4448.0)

    def test_unknown_mode_raises(self) -> None:
        with self.assertRaises(ValueError):
            build_snapshot([], SOURCE, STAMP, key_mode="fancy")


class TestPricesEqual(unittest.TestCase):
    """Approximate equality over value maps."""

    def test_within_tolerance(self) -> None:
        self.assertTrue(prices_equal({"a": 5.471}, {"a": 5.4710000004}))

    def test_outside_tolerance(self) -> None:
        self.assertFalse(prices_equal({"a": 5.471}, {"a": 5.472}))

    def test_null_vs_number_differs(self) -> None:
        self.assertFalse(prices_equal({"a": None}, {"a": 5.471}))

    def test_missing_key_counts_as_null(self) -> None:
        self.assertTrue(prices_equal({"a": 1.0}, {"a": 1.0, "b": None}))
        self.assertFalse(prices_equal({"a": 1.0}, {"a": 1.0, "b": 2.0}))


class TestSnapshotsEqual(unittest.TestCase):
    """Snapshot comparison ignores timestamps."""

    def test_same_prices_different_timestamps(self) -> None:
        old = make_snapshot({"pb95": 4448.0}, fetched_at="2026-10-15T06:00:00.000Z")
        new = make_snapshot({"pb95": 4448.0}, fetched_at="2026-10-16T06:00:00.000Z")
        self.assertTrue(snapshots_equal(old, new))

    def test_no_previous(self) -> None:
        self.assertFalse(snapshots_equal(None, make_snapshot({"pb95": 4448.0})))

    def test_legacy_benzyna_matches_pb95(self) -> None:
        """Old ``benzyna`` gross equals a new ``pb95`` gross of 5.471."""
        old = migrate_snapshot({"prices": {"benzyna": {"gross": 5.471}}})
        new = Snapshot(
            source="s",
            fetched_at="t",
            prices={"pb95": PriceEntry(gross=5.471)},
        )
        self.assertTrue(snapshots_equal(old, new))

    def test_raw_field(self) -> None:
        old = make_snapshot({"pb95": 4448.0})
        new = make_snapshot({"pb95": 4449.0})
        self.assertFalse(snapshots_equal(old, new, field_name="raw"))


if __name__ == "__main__":
    unittest.main()
