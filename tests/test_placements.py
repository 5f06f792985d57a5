import pytest
from placements import Placements
from semesters import PLACEMENT_KEYS


class TestFromDict:
    def test_empty_has_all_keys(self):
        assert list(Placements.empty().to_dict()) == list(PLACEMENT_KEYS)

    def test_none_is_empty(self):
        assert Placements.from_dict(None) == Placements.empty()

    def test_missing_keys_filled(self):
        p = Placements.from_dict({"Fall 2025": ["1"]})
        assert p.to_dict()["pool"] == []
        assert p.semester("Fall 2025") == ("1",)

    def test_unknown_keys_dropped(self, capsys):
        p = Placements.from_dict({"Fall 2030": ["1"], "pool": ["2"]})
        assert p.locate("1") is None
        assert "Fall 2030" in capsys.readouterr().err

    def test_duplicate_id_keeps_first_slot(self):
        p = Placements.from_dict({"Spring 2026": ["1"], "pool": ["1"]})
        assert p.locate("1") == "Spring 2026"
        assert p.semester("pool") == ()

    def test_ids_coerced_to_str(self):
        p = Placements.from_dict({"Fall 2025": [1, 2]})
        assert p.semester("Fall 2025") == ("1", "2")

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            Placements.from_dict(["Fall 2025"])

    def test_slot_not_a_list(self):
        with pytest.raises(ValueError):
            Placements.from_dict({"Fall 2025": "1"})


class TestMove:
    def test_move_from_pool(self):
        p = Placements.from_dict({"pool": ["1", "2"]})
        moved = p.move("1", "Fall 2026")
        assert moved.semester("Fall 2026") == ("1",)
        assert moved.semester("pool") == ("2",)

    def test_original_unchanged(self):
        p = Placements.from_dict({"pool": ["1"]})
        p.move("1", "Fall 2026")
        assert p.locate("1") == "pool"

    def test_appends_to_end(self):
        p = Placements.from_dict({"Fall 2025": ["a", "b"], "pool": ["c"]})
        assert p.move("c", "Fall 2025").semester("Fall 2025") == ("a", "b", "c")

    def test_move_within_same_semester_goes_last(self):
        p = Placements.from_dict({"Fall 2025": ["a", "b"]})
        assert p.move("a", "Fall 2025").semester("Fall 2025") == ("b", "a")

    def test_id_occupies_one_slot(self):
        p = Placements.from_dict({"Fall 2025": ["a"]})
        moved = p.move("a", "Spring 2027").move("a", "pool")
        slots = moved.to_dict()
        assert sum(ids.count("a") for ids in slots.values()) == 1
        assert moved.locate("a") == "pool"

    def test_target_label_normalized(self):
        assert Placements.empty().move("a", "spring 2026").locate("a") == "Spring 2026"

    def test_unknown_target(self):
        with pytest.raises(ValueError, match="Unknown placement target"):
            Placements.empty().move("a", "Summer 2026")

    def test_add_to_pool(self):
        assert Placements.empty().add_to_pool("new").semester("pool") == ("new",)


class TestRemoveAndScheduled:
    def test_remove_everywhere(self):
        p = Placements.from_dict({"Fall 2025": ["a", "b"]}).remove("a")
        assert p.locate("a") is None
        assert p.semester("Fall 2025") == ("b",)

    def test_scheduled_skips_pool_in_order(self):
        p = Placements.from_dict({
            "Spring 2027": ["d"],
            "Fall 2025": ["a", "b"],
            "pool": ["z"],
            "Spring 2026": ["c"],
        })
        assert list(p.scheduled()) == [
            ("Fall 2025", 0, "a"),
            ("Fall 2025", 0, "b"),
            ("Spring 2026", 1, "c"),
            ("Spring 2027", 3, "d"),
        ]
