"""
Propagation component - template publish and dependent regeneration.
"""

from .component import (
    DEPENDENTS_FAULT_MESSAGE,
    PUBLISH_FAULT_MESSAGE,
    PublishDesignHandler,
    apply_design,
    regenerate,
)
from .models import PublishDesignCommand, PublishDesignOutcome
from .ports import RegionMergerPort

__all__ = [
    "PublishDesignHandler",
    "PublishDesignCommand",
    "PublishDesignOutcome",
    "PUBLISH_FAULT_MESSAGE",
    "DEPENDENTS_FAULT_MESSAGE",
    "apply_design",
    "regenerate",
    "RegionMergerPort",
]
