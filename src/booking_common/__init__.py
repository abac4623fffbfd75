# ABOUTME: Makes the shared booking_common package importable by the priority engine.
# ABOUTME: Re-exports schema, error, and config types for convenience.

from .config import PriorityConfig, load_priority_config, wait_config_from_settings
from .errors import EmptyInput, InvalidConfig, InvalidSnapshot, PriorityError
from .schemas import PriorityScore, ScoreWeights, StudentSnapshot, WaitConfig, WaitWarningLevel

__all__ = [
    "EmptyInput",
    "InvalidConfig",
    "InvalidSnapshot",
    "PriorityConfig",
    "PriorityError",
    "PriorityScore",
    "ScoreWeights",
    "StudentSnapshot",
    "WaitConfig",
    "WaitWarningLevel",
    "load_priority_config",
    "wait_config_from_settings",
]
