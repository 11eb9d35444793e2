import unittest

from coursekit_core.events import RuntimeEvent
from coursekit_engine.evaluator import ConditionEvaluator
from coursekit_engine.executor import ActionExecutor
from coursekit_engine.interpreter import TriggerInterpreter
from coursekit_engine.resolver import ReferenceResolver
from coursekit_engine.run_log import LogCategory, RuntimeLogger
from coursekit_engine.store import Store

SCORE_TRIGGER = {
    "on": {"event": "click", "target": "b1"},
    "then": [{"action": "addScore", "value": 10}],
}


class TriggerInterpreterTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = Store()
        self.store.set("globals.vars.score", 0)
        self.log = RuntimeLogger()
        resolver = ReferenceResolver(self.store, diagnostics=self.log)
        self.interpreter = TriggerInterpreter(
            ConditionEvaluator(resolver, diagnostics=self.log),
            ActionExecutor(self.store, resolver, diagnostics=self.log),
            self.log,
        )

    def score(self):
        return self.store.get("globals.vars.score")

    def test_target_match_and_mismatch(self) -> None:
        self.interpreter.handle_event(RuntimeEvent(type="click", target="b2"), [SCORE_TRIGGER])
        self.assertEqual(self.score(), 0)

        self.interpreter.handle_event(RuntimeEvent(type="click", target="b1"), [SCORE_TRIGGER])
        self.assertEqual(self.score(), 10)

    def test_matcher_without_target_matches_any_target(self) -> None:
        trigger = {"on": {"event": "click"}, "then": [{"action": "addScore", "value": 1}]}
        self.interpreter.handle_event(RuntimeEvent(type="click", target="anything"), [trigger])
        self.interpreter.handle_event(RuntimeEvent(type="click"), [trigger])
        self.interpreter.handle_event(RuntimeEvent(type="submit"), [trigger])
        self.assertEqual(self.score(), 2)

    def test_all_matching_triggers_fire_in_order(self) -> None:
        triggers = [
            {"on": {"event": "click"}, "then": [{"action": "setVar", "path": "scene.vars.order", "value": "first"}]},
            {"on": {"event": "click"}, "then": [{"action": "setVar", "path": "scene.vars.order", "value": "second"}]},
            SCORE_TRIGGER,
        ]
        matched = self.interpreter.handle_event({"type": "click", "target": "b1"}, triggers)
        self.assertEqual(matched, 3)
        self.assertEqual(self.store.get("scene.vars.order"), "second")
        self.assertEqual(self.score(), 10)

    def test_conditions_choose_branch(self) -> None:
        trigger = {
            "on": {"event": "submit"},
            "if": [{"op": "equals", "left": {"ref": "q1.state.selected"}, "right": "B"}],
            "then": [{"action": "addScore", "value": 10}],
            "else": [{"action": "incVar", "path": "globals.vars.misses"}],
        }
        event = RuntimeEvent(type="submit")

        self.store.update_node_state("q1", {"selected": "A"})
        self.interpreter.handle_event(event, [trigger])
        self.assertEqual(self.score(), 0)
        self.assertEqual(self.store.get("globals.vars.misses"), 1)

        self.store.update_node_state("q1", {"selected": "B"})
        self.interpreter.handle_event(event, [trigger])
        self.assertEqual(self.score(), 10)
        self.assertEqual(self.store.get("globals.vars.misses"), 1)

    def test_false_condition_without_else_does_nothing(self) -> None:
        trigger = {
            "on": {"event": "submit"},
            "if": [{"op": "gt", "left": {"ref": "globals.vars.score"}, "right": 5}],
            "then": [{"action": "addScore", "value": 10}],
        }
        self.interpreter.handle_event(RuntimeEvent(type="submit"), [trigger])
        self.assertEqual(self.score(), 0)

    def test_logs_match_and_branch(self) -> None:
        self.interpreter.handle_event(RuntimeEvent(type="click", target="b1"), [SCORE_TRIGGER])
        self.assertTrue(self.log.get_logs_by_category(LogCategory.EVENT))
        messages = [entry.message for entry in self.log.get_logs_by_category(LogCategory.ACTION)]
        self.assertIn("Executing THEN actions (1)", messages)


if __name__ == "__main__":
    unittest.main()
