import logging
from typing import Any, Optional
from shared.observability import logistics_fanout_calls_total

logger = logging.getLogger(__name__)

class StepResult:
    """Outcome of one side effect: Ok(value) or Err(error)."""

    def __init__(self, name: str, ok: bool, value: Any = None, error: Optional[str] = None):
        self.name = name
        self.ok = ok
        self.value = value
        self.error = error

    @classmethod
    def success(cls, name: str, value: Any = None) -> "StepResult":
        return cls(name, True, value=value)

    @classmethod
    def failure(cls, name: str, error: str) -> "StepResult":
        return cls(name, False, error=error)

    def __repr__(self):
        return f"StepResult({self.name!r}, ok={self.ok})"

class SideEffect:
    def __init__(self, name, action):
        self.name = name
        self.action = action

class FanOut:
    """
    Runs independent best-effort side effects after the primary write.

    Steps run in the order they were added. A failing step is logged and
    recorded; it never stops the steps after it and nothing is rolled back.
    """

    def __init__(self):
        self.steps = []

    def add_step(self, name: str, action):
        """Builder pattern: action is an async callable taking the shared ctx."""
        self.steps.append(SideEffect(name, action))
        return self

    async def execute(self, ctx: dict) -> dict:
        results = {}
        for step in self.steps:
            try:
                value = await step.action(ctx)
                results[step.name] = StepResult.success(step.name, value)
                logistics_fanout_calls_total.labels(step=step.name, outcome="ok").inc()
            except Exception as e:
                # A downstream outage must not fail the request that triggered it
                logger.warning(f"Side effect '{step.name}' failed for order {ctx.get('order_id')}: {e}")
                results[step.name] = StepResult.failure(step.name, str(e) or e.__class__.__name__)
                logistics_fanout_calls_total.labels(step=step.name, outcome="error").inc()
        return results
