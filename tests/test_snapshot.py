"""Tests for GroupStore.snapshot() / restore() and the import format."""

import copy
import json
from datetime import datetime, timezone

import pytest

from domain.errors import MalformedSnapshot
from domain.models import TextSource
from stores.groups import GroupStore


def valid_payload() -> list:
    return [
        {
            "id": "g1",
            "name": "Interviews",
            "textSets": [
                {
                    "id": "t1",
                    "name": "Reference",
                    "content": "the cat sat",
                    "source": "manual",
                    "timestamp": "2024-05-01T10:00:00.000Z",
                },
                {
                    "id": "t2",
                    "name": "call.wav (Batch)",
                    "content": "the dog sat",
                    "source": "audio",
                    "timestamp": "2024-05-01T10:05:00.000Z",
                },
            ],
            "selectedSets": ["t1", "t2"],
        },
        {"id": "g2", "name": "Empty", "textSets": [], "selectedSets": []},
    ]


class TestSnapshot:
    def test_shape(self, populated_group_store):
        data = populated_group_store.snapshot()
        assert isinstance(data, list)
        assert len(data) == 2
        group = data[0]
        assert set(group) == {"id", "name", "textSets", "selectedSets"}
        assert set(group["textSets"][0]) == {"id", "name", "content", "source", "timestamp"}
        assert group["textSets"][0]["source"] == "manual"

    def test_is_json_serializable(self, populated_group_store):
        text = json.dumps(populated_group_store.snapshot())
        assert json.loads(text) == populated_group_store.snapshot()

    def test_timestamps_are_iso_strings(self, populated_group_store):
        ts = populated_group_store.snapshot()[0]["textSets"][0]["timestamp"]
        assert isinstance(ts, str)
        datetime.fromisoformat(ts.replace("Z", "+00:00"))

    def test_selection_follows_text_set_order(self, populated_group_store):
        group = populated_group_store.groups[0]
        a, b = group.text_sets
        group.sets.reorder([b.id, a.id])
        assert populated_group_store.snapshot()[0]["selectedSets"] == [b.id, a.id]


class TestRestore:
    def test_restores_groups_and_text_sets(self, group_store):
        group_store.restore(valid_payload())
        assert [g.name for g in group_store.groups] == ["Interviews", "Empty"]
        first = group_store.get("g1")
        assert [ts.id for ts in first.text_sets] == ["t1", "t2"]
        assert first.selected_ids == {"t1", "t2"}

    def test_parses_timestamps(self, group_store):
        group_store.restore(valid_payload())
        created = group_store.get("g1").text_sets[0].created_at
        assert created == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_parses_timestamps_with_offset(self, group_store):
        payload = valid_payload()
        payload[0]["textSets"][0]["timestamp"] = "2024-05-01T12:00:00+02:00"
        group_store.restore(payload)
        created = group_store.get("g1").text_sets[0].created_at
        assert created == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_audio_source_is_transcribed(self, group_store):
        group_store.restore(valid_payload())
        assert group_store.get("g1").text_sets[1].source is TextSource.TRANSCRIBED

    def test_active_defaults_to_first_group(self, group_store):
        group_store.restore(valid_payload())
        assert group_store.active_group_id == "g1"

    def test_active_group_id_is_kept_when_valid(self, group_store):
        group_store.restore(valid_payload(), active_group_id="g2")
        assert group_store.active_group_id == "g2"

    def test_unknown_active_group_id_is_repaired(self, group_store):
        group_store.restore(valid_payload(), active_group_id="gone")
        assert group_store.active_group_id == "g1"

    def test_dangling_selection_is_dropped(self, group_store):
        payload = valid_payload()
        payload[0]["selectedSets"].append("t-missing")
        group_store.restore(payload)
        assert group_store.get("g1").selected_ids == {"t1", "t2"}

    def test_round_trip_is_exact(self, populated_group_store):
        before = populated_group_store.snapshot()
        active = populated_group_store.active_group_id

        restored = GroupStore()
        restored.restore(copy.deepcopy(before), active_group_id=active)

        assert restored.snapshot() == before
        assert restored.active_group_id == active
        for old, new in zip(populated_group_store.groups, restored.groups):
            assert old.text_sets == new.text_sets
            assert old.selected_ids == new.selected_ids

    def test_round_trip_through_json_text(self, populated_group_store):
        before = populated_group_store.snapshot()
        restored = GroupStore()
        restored.restore(json.loads(json.dumps(before)))
        assert restored.snapshot() == before


class TestMalformedRestore:
    @pytest.mark.parametrize("payload", [
        {"groups": []},
        "not a list",
        None,
        42,
        [],
    ])
    def test_rejects_non_array_or_empty(self, populated_group_store, payload):
        before = populated_group_store.snapshot()
        with pytest.raises(MalformedSnapshot):
            populated_group_store.restore(payload)
        assert populated_group_store.snapshot() == before

    @pytest.mark.parametrize("mutate", [
        lambda p: p[0].pop("name"),
        lambda p: p[0].pop("textSets"),
        lambda p: p[1].pop("selectedSets"),
        lambda p: p[0]["textSets"][0].pop("content"),
        lambda p: p[0]["textSets"][0].update(timestamp="yesterday"),
        lambda p: p[0]["textSets"][0].update(source="fax"),
        lambda p: p[0]["textSets"][0].pop("source"),
        lambda p: p[0]["textSets"][0].update(timestamp=0),
        lambda p: p[0]["textSets"][0].update(timestamp=1714557600.5),
        lambda p: p.append("not an object"),
        lambda p: p[1].update(id="g1"),
        lambda p: p[0]["textSets"][1].update(id="t1"),
    ])
    def test_shape_failures_leave_state_untouched(self, populated_group_store, mutate):
        payload = valid_payload()
        mutate(payload)
        before = populated_group_store.snapshot()
        active = populated_group_store.active_group_id

        with pytest.raises(MalformedSnapshot):
            populated_group_store.restore(payload, active_group_id="g1")

        assert populated_group_store.snapshot() == before
        assert populated_group_store.active_group_id == active
