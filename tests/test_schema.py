"""
Schema construction and union tests.
"""

from operator import add

import pytest

from graphstate.errors import SchemaConflictError
from graphstate.state.channels import Channel, StateSchema
from graphstate.state.merger import StateMerger
from graphstate.state.reducers import append


class TestSchemaConstruction:
    def test_preserves_declaration_order(self):
        schema = StateSchema([Channel("b"), Channel("a"), Channel("c")])

        assert list(schema) == ["b", "a", "c"]

    def test_duplicate_name_in_one_declaration_conflicts(self):
        with pytest.raises(SchemaConflictError):
            StateSchema([Channel("x"), Channel("x", reducer=add)])

    def test_default_must_be_a_factory(self):
        with pytest.raises(TypeError):
            Channel("items", default=[])

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Channel("")

    def test_with_channels_returns_new_schema(self):
        base = StateSchema([Channel("x")])

        extended = base.with_channels(Channel("y", reducer=add, default=int))

        assert list(base) == ["x"]
        assert list(extended) == ["x", "y"]


class TestFromTypedDict:
    """Schemas declared the same way graph state classes are."""

    def test_annotated_fields_become_reducer_channels(self, research_state_cls):
        schema = StateSchema.from_typed_dict(research_state_cls)

        assert list(schema) == ["question", "items", "scores", "step_count"]
        assert schema["items"].reducer is add
        assert schema["items"].default is list
        assert schema["scores"].default is dict
        assert schema["step_count"].default is int

    def test_plain_fields_are_replacement_channels(self, research_state_cls):
        schema = StateSchema.from_typed_dict(research_state_cls)

        assert schema["question"].is_replace
        assert not schema["question"].has_default

    def test_end_to_end_merge(self, research_state_cls, merger):
        schema = StateSchema.from_typed_dict(research_state_cls)
        state = merger.initialize(schema)

        state = merger.merge_all(
            schema,
            state,
            [
                {"question": "q", "items": ["a"], "step_count": 1},
                {"items": ["b"], "scores": {"a": 0.5}, "step_count": 1},
                {"scores": {"b": 0.9}},
            ],
        )

        assert state.to_dict() == {
            "question": "q",
            "items": ["a", "b"],
            "scores": {"a": 0.5, "b": 0.9},
            "step_count": 2,
        }


class TestMergeSchemas:
    def test_later_schema_wins_whole_channel(self):
        a = StateSchema([Channel("x", reducer=add, default=lambda: [1]), Channel("only_a")])
        b_channel = Channel("x", default=lambda: [2])
        b = StateSchema([b_channel, Channel("only_b")])

        merged = StateMerger.merge_schemas(a, b)

        assert merged["x"] == b_channel
        assert merged["x"].reducer is None
        assert set(merged) == {"x", "only_a", "only_b"}

    def test_inputs_are_unchanged(self):
        a = StateSchema([Channel("x")])
        b = StateSchema([Channel("y")])

        StateMerger.merge_schemas(a, b)

        assert list(a) == ["x"]
        assert list(b) == ["y"]

    def test_strict_raises_on_differing_definitions(self):
        a = StateSchema([Channel("x", reducer=add, default=list)])
        b = StateSchema([Channel("x", reducer=append, default=list)])

        with pytest.raises(SchemaConflictError, match="x"):
            StateMerger.merge_schemas(a, b, strict=True)

    def test_strict_accepts_identical_definitions(self):
        shared = Channel("x", reducer=add, default=list)
        a = StateSchema([shared, Channel("y")])
        b = StateSchema([shared, Channel("z")])

        merged = StateMerger.merge_schemas(a, b, strict=True)

        assert list(merged) == ["x", "y", "z"]
