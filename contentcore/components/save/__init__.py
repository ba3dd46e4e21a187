"""
Save component - versioned edits of content entries.
"""

from ._impl import derive_url_path, next_version, validate_save_command
from .component import CONFLICT_FAULT_MESSAGE, SAVE_FAULT_MESSAGE, SaveContentHandler
from .models import DEFAULT_LIMITS, SaveContentCommand, SaveContentOutcome, SaveLimits
from .ports import RulesPort

__all__ = [
    "SaveContentHandler",
    "SaveContentCommand",
    "SaveContentOutcome",
    "SaveLimits",
    "DEFAULT_LIMITS",
    "CONFLICT_FAULT_MESSAGE",
    "SAVE_FAULT_MESSAGE",
    "derive_url_path",
    "next_version",
    "validate_save_command",
    "RulesPort",
]
