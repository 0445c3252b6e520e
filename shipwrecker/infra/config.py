"""Application configuration and env loading."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from shipwrecker.core.models import Difficulty

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILES: tuple[str, ...] = (".env.app", ".env.app.local")


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Immutable room runtime settings."""

    ai_delay_min: float = 1.0
    ai_delay_max: float = 2.0
    default_difficulty: Difficulty = Difficulty.MEDIUM
    seed: int | None = None


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Copy `KEY=VALUE` pairs from `path` into `os.environ`.

    A missing file is skipped. Values from the file win over variables
    already set unless `override_existing` is false.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return
    with env_path.open(encoding="utf-8") as handle:
        for key, value in _env_pairs(handle):
            if override_existing or key not in os.environ:
                os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files left to right; later files win."""
    for path in paths if paths is not None else DEFAULT_ENV_FILES:
        load_env_file(path, override_existing=override_existing)


def load_game_config() -> GameConfig:
    """Build `GameConfig` from `SHIPWRECKER_*` env vars."""
    defaults = GameConfig()
    delay_min = _float("SHIPWRECKER_AI_DELAY_MIN", defaults.ai_delay_min)
    delay_max = _float("SHIPWRECKER_AI_DELAY_MAX", defaults.ai_delay_max)
    if delay_max < delay_min:
        delay_max = delay_min

    raw_difficulty = os.getenv("SHIPWRECKER_DEFAULT_DIFFICULTY", defaults.default_difficulty.value)
    try:
        difficulty = Difficulty(raw_difficulty.strip().lower())
    except ValueError:
        logger.warning("config_invalid key=SHIPWRECKER_DEFAULT_DIFFICULTY value=%s", raw_difficulty)
        difficulty = defaults.default_difficulty

    raw_seed = os.getenv("SHIPWRECKER_SEED", "").strip()
    seed: int | None = None
    if raw_seed:
        try:
            seed = int(raw_seed)
        except ValueError:
            logger.warning("config_invalid key=SHIPWRECKER_SEED value=%s", raw_seed)

    return GameConfig(
        ai_delay_min=delay_min,
        ai_delay_max=delay_max,
        default_difficulty=difficulty,
        seed=seed,
    )


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("config_invalid key=%s value=%s", name, raw)
        return default
    return max(0.0, value)


def _env_pairs(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if sep and key:
            yield key, _unquote(value.strip())


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value
