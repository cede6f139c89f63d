"""Tests for GroupStore group management in stores/groups.py."""

import pytest

from domain.errors import GroupNotFound
from domain.models import TextSource
from stores.groups import GroupStore


class TestInitialState:
    def test_starts_with_default_group(self, group_store):
        assert len(group_store) == 1
        assert group_store.active_group.name == "Default Group"
        assert group_store.active_group_id == group_store.groups[0].id

    def test_custom_default_name(self):
        store = GroupStore(default_group_name="Interviews")
        assert store.active_group.name == "Interviews"


class TestAddGroup:
    def test_generated_names(self, group_store):
        second = group_store.add_group()
        third = group_store.add_group()
        assert second.name == "Group 2"
        assert third.name == "Group 3"

    def test_new_group_is_active_and_empty(self, group_store):
        group = group_store.add_group()
        assert group_store.active_group_id == group.id
        assert group.text_sets == []
        assert group.selected_ids == frozenset()

    def test_name_uses_count_after_removal(self, group_store):
        second = group_store.add_group()
        group_store.add_group()
        group_store.remove_group(second.id)
        assert group_store.add_group().name == "Group 3"


class TestRemoveGroup:
    def test_last_group_is_protected(self, group_store):
        only = group_store.active_group_id
        assert not group_store.remove_group(only)
        assert len(group_store) == 1
        assert group_store.active_group_id == only

    def test_unknown_group_is_noop(self, group_store):
        group_store.add_group()
        assert not group_store.remove_group("missing")
        assert len(group_store) == 2

    def test_removing_inactive_keeps_pointer(self, group_store):
        first = group_store.groups[0]
        second = group_store.add_group()
        group_store.set_active(first.id)
        assert group_store.remove_group(second.id)
        assert group_store.active_group_id == first.id

    def test_removing_active_activates_first_remaining(self, group_store):
        first = group_store.groups[0]
        second = group_store.add_group()
        third = group_store.add_group()
        group_store.set_active(first.id)

        group_store.remove_group(first.id)
        assert group_store.active_group_id == second.id

        group_store.set_active(third.id)
        group_store.remove_group(third.id)
        assert group_store.active_group_id == second.id
        assert len(group_store) == 1

    def test_groups_stay_independent(self, populated_group_store):
        first, second = populated_group_store.groups
        populated_group_store.remove_group(second.id)
        assert [ts.name for ts in first.text_sets] == ["A", "B"]


class TestRenameAndActivate:
    def test_rename(self, group_store):
        gid = group_store.active_group_id
        assert group_store.rename_group(gid, " Podcast takes ")
        assert group_store.get(gid).name == "Podcast takes"

    def test_rename_blank_is_noop(self, group_store):
        gid = group_store.active_group_id
        assert not group_store.rename_group(gid, "  ")
        assert group_store.get(gid).name == "Default Group"

    def test_set_active_unknown_is_noop(self, group_store):
        before = group_store.active_group_id
        assert not group_store.set_active("missing")
        assert group_store.active_group_id == before

    def test_set_active(self, group_store):
        first = group_store.groups[0]
        group_store.add_group()
        assert group_store.set_active(first.id)
        assert group_store.active_group is first

    def test_require_raises(self, group_store):
        with pytest.raises(GroupNotFound):
            group_store.require("missing")


class TestSelectSet:
    def test_select_and_deselect(self, populated_group_store):
        second = populated_group_store.groups[1]
        ts = second.text_sets[0]
        assert populated_group_store.select_set(second.id, ts.id, True)
        assert second.selected_ids == {ts.id}
        populated_group_store.select_set(second.id, ts.id, False)
        assert second.selected_ids == frozenset()

    def test_cannot_select_set_of_other_group(self, populated_group_store):
        first, second = populated_group_store.groups
        foreign = first.text_sets[0]
        assert not populated_group_store.select_set(second.id, foreign.id, True)
        assert second.selected_ids == frozenset()

    def test_unknown_group(self, populated_group_store):
        assert not populated_group_store.select_set("missing", "x", True)


class TestProduceTextSet:
    def test_adds_transcribed_set(self, group_store):
        gid = group_store.active_group_id
        ts = group_store.produce_text_set(gid, "transcribed words")
        assert ts.source is TextSource.TRANSCRIBED
        assert group_store.get(gid).text_sets == [ts]
        assert ts.name == "Transcript 1"

    def test_unknown_group(self, group_store):
        with pytest.raises(GroupNotFound):
            group_store.produce_text_set("missing", "text")
