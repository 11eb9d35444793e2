import unittest

from coursekit_core.events import RuntimeEvent
from coursekit_engine.event_bus import EventBus
from coursekit_engine.run_log import LogLevel, RuntimeLogger


class EventBusTest(unittest.TestCase):
    def test_emit_delivers_event(self) -> None:
        bus = EventBus()
        seen = []

        bus.on("click", seen.append)
        event = RuntimeEvent(type="click", target="b1")
        bus.emit(event)

        self.assertEqual(seen, [event])

    def test_type_listeners_run_before_wildcard_in_registration_order(self) -> None:
        bus = EventBus()
        order = []

        bus.on_all(lambda e: order.append("all-1"))
        bus.on("click", lambda e: order.append("click-1"))
        bus.on_all(lambda e: order.append("all-2"))
        bus.on("click", lambda e: order.append("click-2"))
        bus.on("other", lambda e: order.append("other"))

        bus.emit(RuntimeEvent(type="click"))

        self.assertEqual(order, ["click-1", "click-2", "all-1", "all-2"])

    def test_unsubscribe_removes_listener(self) -> None:
        bus = EventBus()
        seen = []

        unsubscribe = bus.on("click", seen.append)
        unsubscribe_all = bus.on_all(seen.append)
        bus.emit(RuntimeEvent(type="click"))
        self.assertEqual(len(seen), 2)

        unsubscribe()
        unsubscribe_all()
        bus.emit(RuntimeEvent(type="click"))

        self.assertEqual(len(seen), 2)
        self.assertEqual(bus.listener_count(), 0)

    def test_off_nonexistent_listener_silent(self) -> None:
        bus = EventBus()
        bus.off("click", print)
        bus.off_all(print)
        self.assertEqual(bus.listener_count("click"), 0)

    def test_listener_failure_isolated(self) -> None:
        log = RuntimeLogger()
        bus = EventBus(diagnostics=log)
        seen = []

        def bad_listener(event):
            raise RuntimeError("boom")

        bus.on("click", bad_listener)
        bus.on("click", lambda e: seen.append("typed"))
        bus.on_all(bad_listener)
        bus.on_all(lambda e: seen.append("wildcard"))

        bus.emit(RuntimeEvent(type="click"))

        self.assertEqual(seen, ["typed", "wildcard"])
        errors = log.get_logs_by_level(LogLevel.ERROR)
        self.assertEqual(len(errors), 2)
        self.assertIn("boom", errors[0].message)

    def test_listener_failure_without_diagnostics_does_not_raise(self) -> None:
        bus = EventBus()

        def bad_listener(event):
            raise ValueError("nope")

        bus.on("click", bad_listener)
        with self.assertLogs("coursekit.engine.event_bus", level="ERROR"):
            bus.emit(RuntimeEvent(type="click"))

    def test_nested_emit_completes_before_outer_dispatch_resumes(self) -> None:
        bus = EventBus()
        order = []

        def on_click(event):
            order.append("click:start")
            bus.emit(RuntimeEvent(type="inner"))
            order.append("click:end")

        bus.on("click", on_click)
        bus.on("inner", lambda e: order.append("inner"))
        bus.on_all(lambda e: order.append(f"all:{e.type}"))

        bus.emit(RuntimeEvent(type="click"))

        self.assertEqual(order, ["click:start", "inner", "all:inner", "click:end", "all:click"])

    def test_clear_drops_subscriptions(self) -> None:
        bus = EventBus()
        seen = []

        bus.on("click", seen.append)
        bus.on_all(seen.append)
        bus.clear()
        bus.emit(RuntimeEvent(type="click"))

        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
