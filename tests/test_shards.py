"""Tests for the individual context shards."""

import pytest

from cortexmix.cognition.shards import (
    AmygdalaShard,
    ContextShard,
    FrontalShard,
    HippocampusShard,
    SocialShard,
    SpatialShard,
    VisualCortexShard,
)
from cortexmix.oracle import SpatialOracle, WorldRegistry
from cortexmix.schemas import EntityKind, MemoryKind, PerceivedEntity, Trigger, Vec3


def _entity(entity_id, distance, direction, kind=EntityKind.AGENT, name=None):
    return PerceivedEntity(id=entity_id, kind=kind, name=name, distance=distance, direction=direction)


# ---------------------------------------------------------------------------
# Visual cortex
# ---------------------------------------------------------------------------


def test_visual_cortex_filters_by_fov_and_range():
    shard = VisualCortexShard()
    forward = Vec3(z=1)
    shard.update(
        [
            _entity("ahead", 5, Vec3(z=1), kind=EntityKind.PLAYER, name="Player"),
            _entity("behind", 2, Vec3(z=-1)),
            _entity("diagonal", 3, Vec3(x=1, z=1), name="Bob"),
            _entity("too_far", 25, Vec3(z=1)),
            _entity("sideways", 1, Vec3(x=1)),
        ],
        forward,
    )

    assert [entity.id for entity in shard.entities] == ["diagonal", "ahead"]
    assert shard.render() == (
        "| Type | Name | Dist |\n"
        "|---|---|---|\n"
        "| AGENT | Bob | 3.0m |\n"
        "| PLAYER | Player | 5.0m |"
    )


def test_visual_cortex_truncates_to_max_entities():
    shard = VisualCortexShard(max_entities=2)
    shard.update([_entity(f"e{i}", 10 - i, Vec3(z=1)) for i in range(5)], Vec3(z=1))

    assert [entity.id for entity in shard.entities] == ["e4", "e3"]


def test_visual_cortex_without_forward_applies_range_only():
    shard = VisualCortexShard(max_entities=2)
    shard.update(
        [
            _entity("behind", 4, Vec3(z=-1)),
            _entity("too_far", 25, Vec3(z=1)),
            _entity("sideways", 1, Vec3(x=1)),
            _entity("ahead", 6, Vec3(z=1)),
        ]
    )

    assert [entity.id for entity in shard.entities] == ["sideways", "behind"]


def test_visual_cortex_empty_render():
    shard = VisualCortexShard()
    assert shard.render() == "No entities in sight."
    assert shard.relevance(Trigger.PERCEPTION) == 1.0
    assert shard.relevance(Trigger.GOAL_CHECK) == 0.1


# ---------------------------------------------------------------------------
# Hippocampus
# ---------------------------------------------------------------------------


def test_hippocampus_never_exceeds_capacity():
    shard = HippocampusShard(capacity=5, clock=lambda: 42.0)
    for index in range(8):
        shard.add_memory(f"m{index}")

    memories = shard.memories()
    assert len(shard) == 5
    assert [memory.content for memory in memories] == ["m7", "m6", "m5", "m4", "m3"]
    assert len({memory.id for memory in memories}) == 5
    assert memories[0].timestamp == 42.0


def test_hippocampus_clamps_importance():
    shard = HippocampusShard()
    entry = shard.add_memory("big deal", MemoryKind.CONVERSATION, importance=4.0)
    assert entry.importance == 1.0
    assert entry.kind is MemoryKind.CONVERSATION


def test_hippocampus_consolidate():
    shard = HippocampusShard()
    assert shard.consolidate("nothing happened") is None
    assert shard.render() == "No recent memories."

    shard.add_memory("saw the player")
    shard.add_memory("walked to the desk")
    summary = shard.consolidate("I met the player and went to my desk.")

    assert summary.kind is MemoryKind.SUMMARY
    assert summary.importance == 0.8
    assert shard.memories() == [summary]
    assert shard.render() == "- I met the player and went to my desk."


# ---------------------------------------------------------------------------
# Social
# ---------------------------------------------------------------------------


def test_social_new_relationship_defaults_and_clamping():
    shard = SocialShard(clock=lambda: 1.0)
    created = shard.update_relationship("p1", "Ada", sentiment_delta=0.7)
    assert created.familiarity == pytest.approx(0.1)
    assert created.sentiment == 1.0

    updated = shard.update_relationship("p1", "Ada", sentiment_delta=-3.0)
    assert updated.sentiment == -1.0
    assert updated.familiarity == pytest.approx(0.15)
    assert updated.interaction_count == 2


def test_social_familiarity_saturates():
    shard = SocialShard()
    previous = 0.0
    for _ in range(30):
        familiarity = shard.update_relationship("p1", "Ada").familiarity
        assert familiarity >= previous
        previous = familiarity
    assert previous == 1.0


def test_social_render_depends_on_focus():
    shard = SocialShard()
    shard.update_relationship("p1", "Ada")
    assert shard.render() == ""
    assert shard.relevance(Trigger.SOCIAL) == 0.0

    shard.set_current_interaction("stranger")
    assert shard.render() == "Speaking with: Unknown entity."

    shard.set_current_interaction("p1")
    assert shard.render() == "Speaking with: Ada (stranger, neutral). Met 1 times."
    assert shard.relevance(Trigger.SOCIAL) == 1.0
    assert shard.relevance(Trigger.PERCEPTION) == 0.4


def test_social_returns_copies():
    shard = SocialShard()
    shard.update_relationship("p1", "Ada")
    copy = shard.get_relationship("p1")
    copy.name = "Mallory"
    assert shard.get_relationship("p1").name == "Ada"
    assert shard.get_relationship("nobody") is None


# ---------------------------------------------------------------------------
# Amygdala
# ---------------------------------------------------------------------------


def test_amygdala_clamps_then_decays():
    shard = AmygdalaShard()
    state = shard.update(0.5, 0.0)

    assert state.valence == pytest.approx(0.995)
    assert state.arousal == pytest.approx(0.3)
    assert shard.render() == "Mood: content, Energy: relaxed"


def test_amygdala_drifts_toward_neutral():
    shard = AmygdalaShard()
    shard.update(-1.0, 1.0)
    for _ in range(500):
        shard.update()

    assert shard.state.valence == pytest.approx(0.5, abs=0.01)
    assert shard.state.arousal == pytest.approx(0.3, abs=0.01)
    assert shard.relevance(Trigger.MEMORY_RECALL) == 0.2


# ---------------------------------------------------------------------------
# Frontal
# ---------------------------------------------------------------------------


def test_frontal_keeps_goals_sorted_by_priority():
    shard = FrontalShard()
    assert shard.render() == "No active goals."

    shard.add_goal("low", priority=0.2)
    high = shard.add_goal("high", priority=0.9)
    shard.add_goal("mid", priority=0.5)
    shard.add_goal("mid too", priority=0.5)

    assert [goal.description for goal in shard.goals] == ["high", "mid", "mid too", "low"]

    shard.update_progress(high.id, 1.5)
    assert shard.render() == "Current Goal: high (100% complete)"

    shard.complete_goal(high.id)
    assert shard.render() == "Current Goal: mid (0% complete)"


def test_all_default_shards_satisfy_protocol():
    oracle = SpatialOracle(WorldRegistry())
    shards = [
        VisualCortexShard(),
        SpatialShard("agent", oracle),
        HippocampusShard(),
        SocialShard(),
        AmygdalaShard(),
        FrontalShard(),
    ]
    for shard in shards:
        assert isinstance(shard, ContextShard)
    assert shards[1].render() == "Location: Unknown"
