"""步骤组合测试"""

import asyncio

import pytest

from contributor_analytics.services.steps import Step, create_step, map_step, pipe


def test_pipe_runs_sync_and_async_steps_in_order():
    calls = []

    def add_one(value, context):
        calls.append("add_one")
        return value + 1

    async def double(value, context):
        calls.append("double")
        return value * context["factor"]

    pipeline = pipe(create_step("add one", add_one), double)

    assert asyncio.run(pipeline(3, {"factor": 2})) == 8
    assert calls == ["add_one", "double"]


def test_pipe_name_defaults_to_step_names():
    pipeline = pipe(create_step("first", lambda v, c: v), create_step("second", lambda v, c: v))

    assert isinstance(pipeline, Step)
    assert pipeline.name == "first -> second"
    assert pipe(lambda v, c: v, name="custom").name == "custom"


def test_map_step_preserves_input_order():
    async def label(value, context):
        await asyncio.sleep(0)
        return f"{context}-{value}"

    mapped = map_step(create_step("label", label))

    assert mapped.name == "map(label)"
    assert asyncio.run(mapped([3, 1, 2], "x")) == ["x-3", "x-1", "x-2"]


def test_map_step_on_empty_sequence():
    assert asyncio.run(map_step(lambda v, c: v)([], None)) == []


def test_pipe_propagates_step_errors():
    def boom(value, context):
        raise ValueError("bad input")

    pipeline = pipe(lambda v, c: v, boom, lambda v, c: v)

    with pytest.raises(ValueError, match="bad input"):
        asyncio.run(pipeline(1, None))
