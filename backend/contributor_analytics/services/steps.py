"""流水线步骤组合

一个步骤就是一个 (input, context) -> output 的函数，可以是同步或异步。
pipe() 按顺序串联步骤，map_step() 对序列中的每个元素执行同一步骤。
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

StepFn = Callable[[Any, Any], Any]


class Step:
    """带名称的步骤，名称只用于日志"""

    def __init__(self, name: str, fn: StepFn) -> None:
        self.name = name
        self._fn = fn

    async def __call__(self, value: Any, context: Any) -> Any:
        result = self._fn(value, context)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"Step({self.name!r})"


def create_step(name: str, fn: StepFn) -> Step:
    return Step(name, fn)


def as_step(step: Step | StepFn) -> Step:
    if isinstance(step, Step):
        return step
    return Step(getattr(step, "__name__", "anonymous"), step)


def pipe(*steps: Step | StepFn, name: str | None = None) -> Step:
    """按顺序执行步骤，上一步的输出作为下一步的输入"""
    resolved = [as_step(step) for step in steps]
    pipeline_name = name or " -> ".join(step.name for step in resolved)

    async def run(value: Any, context: Any) -> Any:
        for step in resolved:
            logger.debug(f"[{pipeline_name}] 执行步骤: {step.name}")
            value = await step(value, context)
        return value

    return Step(pipeline_name, run)


def map_step(step: Step | StepFn) -> Step:
    """对输入序列逐个执行 step，结果顺序与输入一致

    所有元素共用 context 中的数据库会话，因此逐个 await，不并发执行。
    """
    inner = as_step(step)

    async def run(items: Sequence[Any], context: Any) -> list[Any]:
        results = []
        for item in items:
            results.append(await inner(item, context))
        return results

    return Step(f"map({inner.name})", run)
