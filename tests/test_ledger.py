"""Tests for the version ledger and save references."""

from datetime import datetime

import pytest

from save_manager.core import ledger
from save_manager.core.errors import (
    InvalidSaveName,
    NoAutosaveAvailable,
    SaveAlreadyExists,
    SaveNotFound,
)
from save_manager.core.models import Category
from save_manager.core.references import (
    AUTOSAVE,
    ByAuto,
    ByName,
    ByPosition,
    parse_reference,
    resolve,
    resolve_many,
    resolve_save,
)


NOW = datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def category():
    cat = Category(name="proj", tracked_paths=["/work/src"])
    for name in ("A", "B", "C"):
        ledger.register(cat, name, now=NOW)
    return cat


class TestRegister:
    def test_allocates_increasing_indexes(self):
        cat = Category(name="proj", tracked_paths=["/work/src"])

        first = ledger.register(cat, now=NOW)
        second = ledger.register(cat, "named", now=NOW)

        assert (first.real_index, second.real_index) == (0, 1)
        assert cat.next_index == 2
        assert first.display_name is None
        assert first.created_at == "2026-10-18T09:30:00"

    @pytest.mark.parametrize("name", ["3", "0", "007", "auto", ""])
    def test_rejects_ambiguous_names(self, category, name):
        with pytest.raises(InvalidSaveName):
            ledger.register(category, name, now=NOW)
        assert len(category.saves) == 3
        assert category.next_index == 3

    def test_names_that_only_look_numeric_are_allowed(self, category):
        save = ledger.register(category, "-1", now=NOW)
        assert save.display_name == "-1"
        assert ledger.register(category, "v2", now=NOW).display_name == "v2"

    def test_duplicate_name(self, category):
        with pytest.raises(SaveAlreadyExists):
            ledger.register(category, "B", now=NOW)

    def test_unnamed_saves_never_collide(self, category):
        ledger.register(category, now=NOW)
        ledger.register(category, now=NOW)
        assert len(category.saves) == 5

    def test_indexes_are_never_reused_after_removal(self, category):
        ledger.remove(category, category.saves[-1])
        save = ledger.register(category, now=NOW)
        assert save.real_index == 3
        indexes = [s.real_index for s in category.saves]
        assert indexes == sorted(set(indexes))


class TestRemove:
    def test_positions_shift_but_indexes_stay(self, category):
        ledger.remove(category, category.saves[0])

        assert [s.display_name for s in category.saves] == ["B", "C"]
        assert [s.real_index for s in category.saves] == [1, 2]

    def test_find_by_name(self, category):
        assert ledger.find_by_name(category, "C").real_index == 2
        with pytest.raises(SaveNotFound):
            ledger.find_by_name(category, "Z")


class TestReferences:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("0", ByPosition(0)),
            ("12", ByPosition(12)),
            ("auto", ByAuto()),
            ("v1", ByName("v1")),
            ("Auto", ByName("Auto")),
            ("-1", ByName("-1")),
        ],
    )
    def test_parse(self, token, expected):
        assert parse_reference(token) == expected

    def test_position_is_not_real_index(self, category):
        ledger.remove(category, category.saves[0])
        assert resolve_save(category, "0").display_name == "B"

    def test_position_out_of_range(self, category):
        with pytest.raises(SaveNotFound):
            resolve_save(category, "3")

    def test_name_lookup(self, category):
        assert resolve_save(category, "C") is category.saves[2]

    def test_auto_only_when_allowed(self, category):
        category.autosave_marker = "2026-10-18T09:31:00"
        assert resolve(category, ByAuto(), allow_auto=True) is AUTOSAVE
        with pytest.raises(SaveNotFound):
            resolve(category, ByAuto(), allow_auto=False)

    def test_auto_without_marker(self, category):
        with pytest.raises(NoAutosaveAvailable):
            resolve(category, ByAuto(), allow_auto=True)

    def test_batch_is_resolved_sequentially(self, category):
        selected = resolve_many(category, ["0", "0"])

        assert [s.display_name for s in selected] == ["A", "B"]
        # Category itself untouched
        assert len(category.saves) == 3

    def test_batch_mixes_names_and_positions(self, category):
        selected = resolve_many(category, ["B", "1"])
        assert [s.display_name for s in selected] == ["B", "C"]

    def test_batch_fails_on_shifted_position(self, category):
        with pytest.raises(SaveNotFound):
            resolve_many(category, ["2", "2"])

    def test_batch_cannot_select_same_save_twice(self, category):
        with pytest.raises(SaveNotFound):
            resolve_many(category, ["A", "A"])
