"""Training run configuration."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from tabular_cfr.errors import ConfigError


DEFAULT_ITERATIONS = 1000
DEFAULT_EVAL_INTERVAL = 100
DEFAULT_SEED = 42

# Seconds per duration unit
DURATION_UNITS = {
    'ms': 0.001,
    's': 1.0,
    'sec': 1.0,
    'm': 60.0,
    'min': 60.0,
    'h': 3600.0,
    'd': 86400.0,
}

_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)\s*([a-z]+)')


def parse_duration(text: str) -> float:
    """
    Parse a human readable duration into seconds.

    Accepts a bare number (seconds) or one or more number/unit pairs,
    e.g. "500ms", "30s", "10m", "1h30m", "2d".

    Raises:
        ConfigError: if the text is not a positive duration
    """
    cleaned = text.strip().lower()
    if not cleaned:
        raise ConfigError("Empty duration")

    try:
        seconds = float(cleaned)
    except ValueError:
        seconds = None

    if seconds is None:
        parts = _DURATION_PART.findall(cleaned)
        if not parts or _DURATION_PART.sub('', cleaned).strip():
            raise ConfigError(f"Malformed duration {text!r}")
        seconds = 0.0
        for amount, unit in parts:
            if unit not in DURATION_UNITS:
                raise ConfigError(f"Unknown duration unit {unit!r} in {text!r}")
            seconds += float(amount) * DURATION_UNITS[unit]

    if not 0 < seconds < float('inf'):
        raise ConfigError(f"Duration must be positive and finite, got {text!r}")
    return seconds


@dataclass
class TrainingConfig:
    """Configuration of one training run."""
    game: str
    solver: str
    iterations: Optional[int] = None
    # Wall-clock budget in seconds
    duration: Optional[float] = None
    eval_interval: int = DEFAULT_EVAL_INTERVAL
    log_path: Optional[str] = None
    seed: int = DEFAULT_SEED
    game_params: Dict[str, Any] = field(default_factory=dict)
    print_strategy: bool = False

    def __post_init__(self):
        if self.iterations is None and self.duration is None:
            self.iterations = DEFAULT_ITERATIONS

    def validate(self) -> 'TrainingConfig':
        """
        Check the configuration before any traversal starts.

        Raises:
            ConfigError: on the first invalid field
        """
        if self.iterations is not None and self.duration is not None:
            raise ConfigError("Give either iterations or duration, not both")
        if self.iterations is not None and self.iterations <= 0:
            raise ConfigError(f"iterations must be positive, got {self.iterations}")
        if self.duration is not None and self.duration <= 0:
            raise ConfigError(f"duration must be positive, got {self.duration}")
        if self.eval_interval <= 0:
            raise ConfigError(f"eval_interval must be positive, got {self.eval_interval}")
        return self
