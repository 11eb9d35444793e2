"""Trigger interpretation: the Event-Condition-Action loop.

For each incoming event the interpreter walks the active trigger list once,
in declaration order. Every matching trigger fires independently; one
trigger cannot stop a later one from firing.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from coursekit_core.document import Trigger
from coursekit_core.events import RuntimeEvent
from coursekit_engine.evaluator import ConditionEvaluator
from coursekit_engine.executor import ActionExecutor
from coursekit_engine.run_log import LogCategory, RuntimeLogger


class TriggerInterpreter:
    """Matches events to triggers, evaluates their conditions and runs a branch."""

    def __init__(
        self,
        evaluator: ConditionEvaluator,
        executor: ActionExecutor,
        logger: Optional[RuntimeLogger] = None,
    ):
        self.evaluator = evaluator
        self.executor = executor
        self.logger = logger if logger is not None else evaluator.diagnostics

    def handle_event(self, event: RuntimeEvent, triggers: Iterable[Trigger | dict[str, Any]]) -> int:
        """Run every trigger in ``triggers`` that matches ``event``.

        Returns:
            Number of triggers that matched
        """
        event = RuntimeEvent.coerce(event)
        # Snapshot: a scene change during dispatch must not alter this pass
        triggers = [trigger if isinstance(trigger, Trigger) else Trigger.model_validate(trigger)
                    for trigger in triggers]

        matched = 0
        for index, trigger in enumerate(triggers):
            if trigger.on.matches(event.type, event.target):
                matched += 1
                self._fire(event, trigger, index)
        return matched

    def _fire(self, event: RuntimeEvent, trigger: Trigger, index: int) -> None:
        self.logger.info(
            LogCategory.EVENT,
            f"Trigger #{index} matched {event}",
            {"type": event.type, "target": event.target},
        )

        if trigger.conditions is None:
            result = True
        else:
            result = self.evaluator.evaluate_all(trigger.conditions)
            self.logger.debug(
                LogCategory.CONDITION,
                f"Condition result: {result}",
                {"conditions": [c.model_dump(mode="json") for c in trigger.conditions]},
            )

        if result:
            self.logger.info(LogCategory.ACTION, f"Executing THEN actions ({len(trigger.then)})")
            self.executor.execute_all(trigger.then)
        elif trigger.otherwise is not None:
            self.logger.info(LogCategory.ACTION, f"Executing ELSE actions ({len(trigger.otherwise)})")
            self.executor.execute_all(trigger.otherwise)

    def set_triggers(self, triggers: list[Trigger]) -> None:
        """Record a trigger-set swap (scene change) in the runtime log."""
        self.logger.debug(LogCategory.EVENT, f"Active trigger set replaced ({len(triggers)} triggers)")
