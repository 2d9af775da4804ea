import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

STRATEGIES = ("cp-sat", "random")
MOVE_POLICIES = ("reject", "allow")


class EngineSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: Literal["cp-sat", "random"] = "cp-sat"
    # Retry budget per session for the random placement loop
    max_attempts: int = Field(default=50, ge=1)
    # None = fresh entropy on every run
    random_seed: Optional[int] = None
    time_limit_seconds: float = Field(default=10.0, gt=0)
    # Period cleared by "lunch break" commands that name no period
    lunch_slot: int = Field(default=3, ge=1)
    move_policy: Literal["reject", "allow"] = "reject"
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> EngineSettings:
    """Build settings from ``TIMETABLE_*`` environment variables."""
    env = os.environ if environ is None else environ
    raw = {
        "strategy": env.get("TIMETABLE_STRATEGY"),
        "max_attempts": env.get("TIMETABLE_MAX_ATTEMPTS"),
        "random_seed": env.get("TIMETABLE_RANDOM_SEED"),
        "time_limit_seconds": env.get("TIMETABLE_TIME_LIMIT_SEC"),
        "lunch_slot": env.get("TIMETABLE_LUNCH_SLOT"),
        "move_policy": env.get("TIMETABLE_MOVE_POLICY"),
        "log_level": env.get("TIMETABLE_LOG_LEVEL"),
    }
    # Unset or blank variables fall back to the model defaults
    values = {k: v.strip() for k, v in raw.items() if v is not None and v.strip()}
    if "strategy" in values:
        values["strategy"] = values["strategy"].lower()
    if "move_policy" in values:
        values["move_policy"] = values["move_policy"].lower()
    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()
    try:
        return EngineSettings(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid TIMETABLE_* configuration: {e}") from e


def configure_logging(settings: EngineSettings) -> None:
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {settings.log_level!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
