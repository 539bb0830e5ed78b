import time
from dataclasses import dataclass, field
from datetime import timedelta

from .expiration import Clock


@dataclass(frozen=True)
class ValidationOptions:
    """Optional settings shared by both validation flows.

    With the defaults no expiry check runs, now is read from time.time and
    Ed25519 signatures are checked against the production key.
    """
    max_age: timedelta | None = None
    clock: Clock = field(default=time.time)
    test_environment: bool = False


DEFAULT_OPTIONS = ValidationOptions()


@dataclass
class Config:
    bot_token: str = ""
    bot_id: int | None = None
    options: ValidationOptions = DEFAULT_OPTIONS


_TRUE_VALUES = {"1", "yes", "true", "on"}


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def load_config(config) -> Config:
    """Build a Config from the [TELEGRAM] section of a parsed configparser object."""
    section = config["TELEGRAM"]
    bot_token = section.get("bot_token", "").strip()

    bot_id_raw = section.get("bot_id", "").strip()
    bot_id = int(bot_id_raw) if bot_id_raw else None

    max_age_raw = section.get("init_data_max_age", "").strip()
    max_age = timedelta(seconds=int(max_age_raw)) if max_age_raw else None

    test_environment = _parse_bool(section.get("test_environment", ""))

    return Config(
        bot_token=bot_token,
        bot_id=bot_id,
        options=ValidationOptions(max_age=max_age, test_environment=test_environment),
    )
