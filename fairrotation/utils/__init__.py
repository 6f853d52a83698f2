"""
Utilities package for the Fair Rotation engine.

This package contains constants, logging setup and small helpers used
throughout the engine.
"""
from .time_utils import fmt_mmss
from .logging_utils import configure_logging, get_logger
from .constants import (
    APP_TITLE, BALANCED_PAIR_PERIOD, FORMAT_CONFIGS, GOALIE_POSITION,
    REQUIRED_ATTACKER_RATIO, REQUIRED_DEFENDER_RATIO
)

__all__ = [
    "fmt_mmss", "configure_logging", "get_logger", "APP_TITLE",
    "BALANCED_PAIR_PERIOD", "FORMAT_CONFIGS", "GOALIE_POSITION",
    "REQUIRED_ATTACKER_RATIO", "REQUIRED_DEFENDER_RATIO"
]
