"""Configuration defaults and YAML overrides."""
import os
from dataclasses import dataclass, field
from pathlib import Path

import pytz
import yaml

CONFIG_DIR = Path.home() / ".lifeos"
DEFAULT_CONFIG_PATH = str(CONFIG_DIR / "config.yaml")
DEFAULT_DB_PATH = str(CONFIG_DIR / "lifeos.db")
DEFAULT_OWNER_ID = "00000000-0000-0000-0000-000000000001"
DEFAULT_ZONE = "Asia/Kolkata"
DEFAULT_AI_MODEL = "gemini-2.5-flash"

MAX_STAGE = 5

# Days until next review, keyed by stage
PROBLEM_INTERVALS = {1: 1, 2: 3, 3: 7, 4: 14, 5: 30}
TOPIC_INTERVALS = {1: 5, 2: 15, 3: 30, 4: 45, 5: 60}


class ConfigError(ValueError):
    """Raised when the configuration file holds unusable values."""


@dataclass
class Config:
    db_path: str = DEFAULT_DB_PATH
    owner_id: str = DEFAULT_OWNER_ID
    zone: str = DEFAULT_ZONE
    problem_intervals: dict = field(default_factory=lambda: dict(PROBLEM_INTERVALS))
    topic_intervals: dict = field(default_factory=lambda: dict(TOPIC_INTERVALS))
    ai_model: str = DEFAULT_AI_MODEL
    api_key: str | None = None

    def intervals_for(self, kind: str) -> dict:
        return self.topic_intervals if kind == "topic" else self.problem_intervals


def validate_intervals(table: dict, name: str = "intervals") -> dict:
    """Normalize an interval table and check it covers stages 1-5, increasing.

    YAML gives keys as ints or strings depending on how they were written,
    so both are accepted.
    """
    try:
        parsed = {int(k): int(v) for k, v in table.items()}
    except (AttributeError, TypeError, ValueError):
        raise ConfigError(f"{name} must map stage numbers to whole days")
    if sorted(parsed) != list(range(1, MAX_STAGE + 1)):
        raise ConfigError(f"{name} must define stages 1 to {MAX_STAGE}")
    days = [parsed[s] for s in range(1, MAX_STAGE + 1)]
    if days[0] <= 0:
        raise ConfigError(f"{name} must use positive day counts")
    if any(b <= a for a, b in zip(days, days[1:])):
        raise ConfigError(f"{name} must increase with stage")
    return parsed


def validate_zone(name: str) -> str:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ConfigError(f"Unknown time zone: {name}")
    return name


def load_config(path: str | None = None) -> Config:
    """Build a Config from defaults, the YAML file (if any) and the environment."""
    path = path or os.environ.get("LIFEOS_CONFIG", DEFAULT_CONFIG_PATH)
    data = {}
    if Path(path).exists():
        data = yaml.safe_load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")

    config = Config()
    config.db_path = str(data.get("db_path", os.environ.get("LIFEOS_DB", config.db_path)))
    config.owner_id = str(data.get("owner_id", config.owner_id))
    config.zone = validate_zone(data.get("zone", config.zone))
    config.ai_model = data.get("ai_model", config.ai_model)
    intervals = data.get("intervals") or {}
    if "problems" in intervals:
        config.problem_intervals = validate_intervals(intervals["problems"], "intervals.problems")
    if "topics" in intervals:
        config.topic_intervals = validate_intervals(intervals["topics"], "intervals.topics")
    config.api_key = (
        data.get("api_key")
        or os.environ.get("GEMINI_API_KEY")
        or os.environ.get("API_KEY")
        or None
    )
    return config
