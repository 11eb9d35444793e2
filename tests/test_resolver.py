import unittest

from coursekit_engine.resolver import ReferenceResolver, stringify
from coursekit_engine.run_log import LogLevel, RuntimeLogger
from coursekit_engine.store import Store


class ReferenceResolverTest(unittest.TestCase):
    def setUp(self) -> None:
        self.store = Store()
        self.store.set("globals.vars.score", 5)
        self.store.set("globals.vars.name", "Ada")
        self.store.set("nodes.q1.selected", "B")
        self.log = RuntimeLogger()
        self.resolver = ReferenceResolver(self.store, diagnostics=self.log)

    def test_is_ref(self) -> None:
        self.assertTrue(self.resolver.is_ref({"ref": "globals.vars.score"}))
        self.assertFalse(self.resolver.is_ref({"value": 1}))
        self.assertFalse(self.resolver.is_ref("globals.vars.score"))
        self.assertFalse(self.resolver.is_ref(None))

    def test_resolve_literal_and_reference(self) -> None:
        self.assertEqual(self.resolver.resolve(42), 42)
        self.assertEqual(self.resolver.resolve("text"), "text")
        self.assertEqual(self.resolver.resolve({"ref": "globals.vars.score"}), 5)
        self.assertEqual(self.resolver.resolve({"ref": "q1.state.selected"}), "B")
        self.assertIsNone(self.resolver.resolve({"ref": "globals.vars.missing"}))

    def test_interpolate_resolved_placeholder(self) -> None:
        self.store.set("x", 5)
        self.assertEqual(self.resolver.interpolate("a {{x}} b"), "a 5 b")

    def test_interpolate_unresolved_placeholder_kept_verbatim(self) -> None:
        self.assertEqual(self.resolver.interpolate("a {{x}} b"), "a {{x}} b")

    def test_interpolate_trims_path(self) -> None:
        text = "Hi {{ globals.vars.name }}, score {{globals.vars.score}}"
        self.assertEqual(self.resolver.interpolate(text), "Hi Ada, score 5")

    def test_interpolate_passes_non_strings_through(self) -> None:
        self.assertEqual(self.resolver.interpolate(12), 12)
        self.assertIsNone(self.resolver.interpolate(None))

    def test_stringify(self) -> None:
        self.assertEqual(stringify(True), "true")
        self.assertEqual(stringify(3.0), "3")
        self.assertEqual(stringify(2.5), "2.5")
        self.assertEqual(stringify([1, 2]), "[1, 2]")

    def test_resolve_object_returns_new_structure(self) -> None:
        source = {
            "score": {"ref": "globals.vars.score"},
            "label": "Score: {{globals.vars.score}}",
            "items": [{"ref": "q1.state.selected"}, "plain", {"nested": {"ref": "globals.vars.name"}}],
            "count": 3,
        }
        original = {
            "score": {"ref": "globals.vars.score"},
            "label": "Score: {{globals.vars.score}}",
            "items": [{"ref": "q1.state.selected"}, "plain", {"nested": {"ref": "globals.vars.name"}}],
            "count": 3,
        }

        resolved = self.resolver.resolve_object(source)

        self.assertEqual(
            resolved,
            {"score": 5, "label": "Score: 5", "items": ["B", "plain", {"nested": "Ada"}], "count": 3},
        )
        self.assertEqual(source, original)

    def test_resolve_object_depth_guard(self) -> None:
        resolver = ReferenceResolver(self.store, diagnostics=self.log, max_depth=2)
        deep = {"a": {"b": {"c": {"d": {"ref": "globals.vars.score"}}}}}

        resolved = resolver.resolve_object(deep)

        self.assertEqual(resolved, deep)
        self.assertIsNot(resolved["a"]["b"]["c"], deep["a"]["b"]["c"])
        self.assertEqual(len(self.log.get_logs_by_level(LogLevel.WARN)), 1)


if __name__ == "__main__":
    unittest.main()
