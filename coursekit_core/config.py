"""
Coursekit Configuration.

Runtime and analyzer settings, loadable from a JSON file or the environment.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv


ENV_PREFIX = "COURSEKIT_"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RuntimeConfig:
    """Settings shared by the runtime and the dry-run analyzer.

    Attributes:
        debug: Mirror every runtime log entry to the stdlib logger
        max_logs: Capacity of the runtime log ring buffer
        log_level: Level used by ``setup_logging`` in the CLI
        max_condition_depth: Deepest condition tree the evaluator walks
        max_resolve_depth: Deepest structure ``resolve_object`` walks
        max_dry_run_paths: Cap on execution paths enumerated by the analyzer
    """

    debug: bool = False
    max_logs: int = 1000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    max_condition_depth: int = 64
    max_resolve_depth: int = 64
    max_dry_run_paths: int = 10_000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        return cls(**{k: v for k, v in data.items() if hasattr(cls, k)})

    def to_dict(self) -> dict[str, Any]:
        return {
            "debug": self.debug,
            "max_logs": self.max_logs,
            "log_level": self.log_level,
            "max_condition_depth": self.max_condition_depth,
            "max_resolve_depth": self.max_resolve_depth,
            "max_dry_run_paths": self.max_dry_run_paths,
        }

    @classmethod
    def load(cls, config_path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file

        Returns:
            RuntimeConfig instance (defaults when the file does not exist)
        """
        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    def save(self, config_path: str | Path) -> Path:
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

        return config_path

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "RuntimeConfig":
        """Build a config from ``COURSEKIT_*`` environment variables.

        A ``.env`` file is loaded first; variables already set in the
        process environment win.
        """
        load_dotenv(dotenv_path=dotenv_path)

        config = cls()
        if (debug := os.getenv(f"{ENV_PREFIX}DEBUG")) is not None:
            config.debug = debug.strip().lower() in _TRUTHY
        if max_logs := os.getenv(f"{ENV_PREFIX}MAX_LOGS"):
            config.max_logs = int(max_logs)
        if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            config.log_level = log_level.strip().upper()
        if max_paths := os.getenv(f"{ENV_PREFIX}MAX_DRY_RUN_PATHS"):
            config.max_dry_run_paths = int(max_paths)
        return config
