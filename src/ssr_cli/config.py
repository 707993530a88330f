import tomllib
from pathlib import Path

from ssr_rewrite.sandbox import ExecutionBudget


class SsrConfig:
    """Handles loading of .ssr.toml (or [tool.ssr] in pyproject.toml) configuration"""

    def __init__(self, config_path: Path | None = None):
        self.language: str | None = None
        self.jobs: int = 1
        self.type_add: list[str] = []
        self.max_steps: int = ExecutionBudget.max_steps
        self.timeout: float = ExecutionBudget.timeout

        if config_path and config_path.exists():
            self._load_from_file(config_path)

    def _load_from_file(self, path: Path):
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # Fallback to defaults if parsing fails
            return

        try:
            # .ssr.toml keeps its keys at the top level, pyproject.toml under [tool.ssr]
            ssr_data = data["tool"].get("ssr", {}) if "tool" in data else data
            language = ssr_data.get("language", self.language)
            jobs = max(1, int(ssr_data.get("jobs", self.jobs)))
            type_add = [str(t) for t in ssr_data.get("type-add", self.type_add)]
            script = ssr_data.get("script", {})
            max_steps = int(script.get("max-steps", self.max_steps))
            timeout = float(script.get("timeout", self.timeout))
        except (AttributeError, TypeError, ValueError):
            # Fallback to defaults if a value has the wrong type
            return

        self.language = language if language is None else str(language)
        self.jobs = jobs
        self.type_add = type_add
        self.max_steps = max_steps
        self.timeout = timeout

    def budget(self) -> ExecutionBudget:
        return ExecutionBudget(max_steps=self.max_steps, timeout=self.timeout)
