import json
import unittest

from coursekit_core.config import RuntimeConfig
from coursekit_core.errors import CourseNotLoadedError, SceneNotFoundError
from coursekit_core.events import SCENE_ENTER, RuntimeEvent
from coursekit_engine.run_log import LogLevel
from coursekit_engine.runtime import CourseRuntime, RuntimePhase


def two_scene_course():
    return {
        "schema": "vvce.dsl.v1",
        "meta": {"id": "demo", "version": "1.0.0"},
        "globals": {"vars": {"score": 0}},
        "startSceneId": "A",
        "scenes": [
            {
                "id": "A",
                "vars": {"step": 1},
                "nodes": [{"id": "b1", "type": "Button"}],
                "triggers": [
                    {"on": {"event": "click", "target": "b1"}, "then": [{"action": "addScore", "value": 10}]},
                    {"on": {"event": "click", "target": "next"}, "then": [{"action": "gotoScene", "sceneId": "B"}]},
                    {"on": {"event": "click", "target": "self"}, "then": [{"action": "gotoScene", "sceneId": "A"}]},
                ],
            },
            {
                "id": "B",
                "vars": {"visited": True},
                "triggers": [
                    {
                        "on": {"event": SCENE_ENTER, "target": "B"},
                        "then": [{"action": "toast", "text": "Score: {{globals.vars.score}}"}],
                    },
                ],
            },
        ],
    }


class RuntimeLifecycleTest(unittest.TestCase):
    def setUp(self) -> None:
        self.scene_changes = []
        self.states = []
        self.ui_actions = []
        self.runtime = CourseRuntime(
            on_scene_change=self.scene_changes.append,
            on_state_change=self.states.append,
            on_ui_action=self.ui_actions.append,
        )

    def test_phases(self) -> None:
        self.assertEqual(self.runtime.phase, RuntimePhase.UNLOADED)
        self.runtime.load_course(two_scene_course())
        self.assertEqual(self.runtime.phase, RuntimePhase.LOADED)
        self.runtime.start()
        self.assertEqual(self.runtime.phase, RuntimePhase.ACTIVE)
        self.runtime.destroy()
        self.assertEqual(self.runtime.phase, RuntimePhase.UNLOADED)

    def test_start_and_goto_without_course_raise(self) -> None:
        with self.assertRaises(CourseNotLoadedError):
            self.runtime.start()
        with self.assertRaises(CourseNotLoadedError):
            self.runtime.goto_scene("A")

    def test_goto_unknown_scene_raises(self) -> None:
        self.runtime.load_course(two_scene_course())
        with self.assertRaises(SceneNotFoundError) as ctx:
            self.runtime.goto_scene("Z")
        self.assertEqual(ctx.exception.scene_id, "Z")
        self.assertIsInstance(ctx.exception, LookupError)

    def test_load_seeds_globals_only(self) -> None:
        self.runtime.load_course(two_scene_course())
        state = self.runtime.get_state()
        self.assertEqual(state["globals"]["vars"], {"score": 0})
        self.assertEqual(state["scene"]["vars"], {})

    def test_start_enters_start_scene(self) -> None:
        self.runtime.load_course(two_scene_course())
        self.runtime.start()

        self.assertEqual(self.runtime.get_current_scene_id(), "A")
        self.assertEqual(self.runtime.get_current_scene().id, "A")
        self.assertEqual(self.scene_changes, ["A"])
        self.assertEqual(self.runtime.get_state()["scene"]["vars"], {"step": 1})

    def test_start_with_override_and_snapshot(self) -> None:
        self.runtime.load_course(two_scene_course())
        snapshot = {"globals": {"vars": {"score": 42}}, "scene": {"vars": {}}, "nodes": {}}
        self.runtime.start(start_scene_id="B", initial_state=snapshot)

        self.assertEqual(self.runtime.get_current_scene_id(), "B")
        self.assertEqual(self.ui_actions[0].text, "Score: 42")


class RuntimeEventTest(unittest.TestCase):
    def setUp(self) -> None:
        self.states = []
        self.ui_actions = []
        self.runtime = CourseRuntime(on_state_change=self.states.append, on_ui_action=self.ui_actions.append)
        self.runtime.load_course(two_scene_course())
        self.runtime.start()

    def score(self):
        return self.runtime.get_state()["globals"]["vars"]["score"]

    def test_click_with_matching_target_adds_score(self) -> None:
        self.runtime.emit({"type": "click", "target": "b1"})
        self.assertEqual(self.score(), 10)

    def test_click_with_other_target_leaves_score(self) -> None:
        self.runtime.emit({"type": "click", "target": "b2"})
        self.assertEqual(self.score(), 0)

    def test_scene_change_resets_scene_state_and_keeps_globals(self) -> None:
        self.runtime.emit({"type": "click", "target": "b1"})
        self.runtime.update_node_state("b1", {"pressed": True})

        self.runtime.emit(RuntimeEvent(type="click", target="next"))

        state = self.runtime.get_state()
        self.assertEqual(self.runtime.get_current_scene_id(), "B")
        self.assertEqual(state["nodes"], {})
        self.assertEqual(state["scene"]["vars"], {"visited": True})
        self.assertEqual(state["globals"]["vars"], {"score": 10})
        self.assertEqual(self.ui_actions[-1].text, "Score: 10")

    def test_reentering_same_scene_keeps_scene_state(self) -> None:
        self.runtime.set_state({"scene": {"vars": {"step": 5}}, "nodes": {"b1": {"pressed": True}}})

        self.runtime.emit({"type": "click", "target": "self"})

        state = self.runtime.get_state()
        self.assertEqual(state["scene"]["vars"], {"step": 5})
        self.assertEqual(state["nodes"], {"b1": {"pressed": True}})
        debug_messages = [e.message for e in self.runtime.get_logs() if e.level == LogLevel.DEBUG]
        self.assertTrue(any("Re-entering" in m for m in debug_messages))

    def test_state_change_callback_receives_snapshot(self) -> None:
        self.states.clear()
        self.runtime.emit({"type": "click", "target": "b1"})

        self.assertEqual(len(self.states), 1)
        self.assertEqual(self.states[0]["globals"]["vars"]["score"], 10)
        self.states[0]["globals"]["vars"]["score"] = -1
        self.assertEqual(self.score(), 10)

    def test_host_listeners_observe_events(self) -> None:
        seen = []
        unsubscribe = self.runtime.on("click", lambda e: seen.append(e.target))
        self.runtime.on_all(lambda e: seen.append(f"all:{e.type}"))

        self.runtime.emit({"type": "click", "target": "b1"})
        unsubscribe()
        self.runtime.emit({"type": "click", "target": "b1"})

        self.assertEqual(seen, ["b1", "all:click", "all:click"])
        self.assertEqual(self.score(), 20)

    def test_failing_host_listener_does_not_block_triggers(self) -> None:
        def broken(event):
            raise RuntimeError("observer crashed")

        self.runtime.on("click", broken)
        self.runtime.emit({"type": "click", "target": "b1"})

        self.assertEqual(self.score(), 10)
        errors = [e for e in self.runtime.get_logs() if e.level == LogLevel.ERROR]
        self.assertEqual(len(errors), 1)

    def test_node_state_accessors(self) -> None:
        self.runtime.update_node_state("b1", {"pressed": True})
        self.runtime.update_node_state("b1", {"count": 2})
        self.assertEqual(self.runtime.get_node_state("b1"), {"pressed": True, "count": 2})

    def test_export_logs_is_json_sequence(self) -> None:
        exported = json.loads(self.runtime.export_logs())
        self.assertIsInstance(exported, list)
        self.assertEqual(len(exported), len(self.runtime.get_logs()))
        self.assertEqual(set(exported[0]), {"level", "category", "message", "data", "timestamp"})

    def test_reset_clears_state_logs_and_listeners(self) -> None:
        seen = []
        self.runtime.on_all(seen.append)
        self.runtime.reset()

        self.assertEqual(self.runtime.phase, RuntimePhase.UNLOADED)
        self.assertEqual(self.runtime.get_state()["globals"]["vars"], {})
        self.assertEqual(self.runtime.get_logs(), [])

        self.runtime.load_course(two_scene_course())
        self.runtime.start()
        self.runtime.emit({"type": "click", "target": "b1"})
        self.assertEqual(seen, [])
        self.assertEqual(self.score(), 10)


class RuntimeDiagnosticsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.runtime = CourseRuntime()
        self.runtime.load_course(
            {
                "schema": "vvce.dsl.v1",
                "meta": {"id": "faulty", "version": "1.0.0"},
                "startSceneId": "A",
                "scenes": [
                    {
                        "id": "A",
                        "triggers": [
                            {
                                "on": {"event": "click"},
                                "if": [{"op": "bogus"}],
                                "then": [],
                                "else": [{"action": "nope"}],
                            }
                        ],
                    }
                ],
            }
        )
        self.runtime.start()

    def test_components_share_the_runtime_log(self) -> None:
        for component in (self.runtime.resolver, self.runtime.evaluator, self.runtime.executor):
            self.assertIs(component.diagnostics, self.runtime.logger)
        self.assertIs(self.runtime.interpreter.logger, self.runtime.logger)

    def test_recoverable_faults_reach_runtime_log(self) -> None:
        self.runtime.emit({"type": "click"})

        warnings = [e.message for e in self.runtime.get_logs() if e.level == LogLevel.WARN]
        self.assertIn("Unknown condition operator: bogus", warnings)
        self.assertIn("Unknown action type: nope", warnings)
        self.assertIn("Unknown action type: nope", self.runtime.export_logs())


class RuntimeIsolationTest(unittest.TestCase):
    def test_independent_runtimes_share_no_state(self) -> None:
        first = CourseRuntime()
        second = CourseRuntime(config=RuntimeConfig(max_logs=5))
        for runtime in (first, second):
            runtime.load_course(two_scene_course())
            runtime.start()

        first.emit({"type": "click", "target": "b1"})

        self.assertEqual(first.get_state()["globals"]["vars"]["score"], 10)
        self.assertEqual(second.get_state()["globals"]["vars"]["score"], 0)
        self.assertLessEqual(len(second.get_logs()), 5)


if __name__ == "__main__":
    unittest.main()
