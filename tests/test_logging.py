import io
import logging
import unittest

from coursekit_core.config import RuntimeConfig
from coursekit_core.utils.logging import (
    configure_from_config,
    get_logger,
    log_error,
    log_operation,
    setup_logging,
)


class LoggingSetupTest(unittest.TestCase):
    def setUp(self) -> None:
        self.stream = io.StringIO()

    def tearDown(self) -> None:
        setup_logging()

    def test_get_logger_prefixes_names(self) -> None:
        self.assertEqual(get_logger("engine.runtime").name, "coursekit.engine.runtime")
        self.assertEqual(get_logger("coursekit.core.loader").name, "coursekit.core.loader")

    def test_lines_use_short_logger_name(self) -> None:
        setup_logging(level="INFO", stream=self.stream)

        log_operation(get_logger("core.loader"), "Loaded course", {"id": "demo"})

        self.assertEqual(self.stream.getvalue(), "INFO    [core.loader] Loaded course: id=demo\n")

    def test_level_filters_messages(self) -> None:
        setup_logging(level="warning", stream=self.stream)

        get_logger("engine.runtime").info("hidden")
        get_logger("engine.runtime").warning("shown")

        self.assertNotIn("hidden", self.stream.getvalue())
        self.assertIn("shown", self.stream.getvalue())

    def test_unknown_level_rejected(self) -> None:
        with self.assertRaises(ValueError):
            setup_logging(level="LOUD", stream=self.stream)

    def test_configure_from_config(self) -> None:
        root = configure_from_config(RuntimeConfig(log_level="ERROR"))
        self.assertEqual(root.level, logging.ERROR)

        root = configure_from_config(RuntimeConfig(log_level="ERROR", debug=True))
        self.assertEqual(root.level, logging.DEBUG)

        root = configure_from_config(RuntimeConfig(), verbose=True)
        self.assertEqual(root.level, logging.DEBUG)

    def test_log_error_includes_context_and_traceback(self) -> None:
        setup_logging(stream=self.stream)
        try:
            raise KeyError("score")
        except KeyError as exc:
            log_error(get_logger("engine.event_bus"), "listener 'show'", exc, {"type": "click"})

        output = self.stream.getvalue()
        self.assertIn("listener 'show' failed: KeyError: 'score' (type=click)", output)
        self.assertIn("Traceback", output)


if __name__ == "__main__":
    unittest.main()
