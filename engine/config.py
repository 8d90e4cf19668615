"""
config.py — Playback Timing Configuration
=========================================
All the timing knobs of a run in one place.  The web app builds one
from its Flask config (`BASE_INTERVAL`, `HOLD_DEBOUNCE`,
`SPEED_MULTIPLIER`).
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass
class PlaybackConfig:
    base_interval:            float = 1.0    # seconds between states at 1x
    hold_debounce:            float = 0.25   # press-and-hold delay before auto-repeat
    default_speed_multiplier: int   = 10     # multiplier used while "hold to speed up" is engaged

    def __post_init__(self):
        if self.base_interval <= 0:
            raise ValueError("base_interval must be positive")
        if self.hold_debounce < 0:
            raise ValueError("hold_debounce must not be negative")
        if int(self.default_speed_multiplier) < 1:
            raise ValueError("default_speed_multiplier must be at least 1")
        self.default_speed_multiplier = int(self.default_speed_multiplier)

    # Flask config key → field name
    KEYS = {
        "BASE_INTERVAL":       "base_interval",
        "HOLD_DEBOUNCE":       "hold_debounce",
        "SPEED_MULTIPLIER":    "default_speed_multiplier",
    }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PlaybackConfig":
        """Pick the known upper-case keys out of a Flask-style config mapping."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, name in cls.KEYS.items():
            if key in mapping and name in known:
                kwargs[name] = mapping[key]
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
