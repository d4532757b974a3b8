"""
Strategy registry and configuration store.
"""

from .config_loader import DEFAULT_CONFIG_PATH, ConfigLoader
from .errors import (
    ClusterConsistencyError,
    ConfigError,
    ConfigNotFound,
    ConfigParseError,
    ReportWriteError,
    StrategyResolutionError,
    UnknownMnemonic,
)
from .shortcodes import (
    CLOUDLET_SCHEDULERS,
    REGISTRY,
    STRATEGIES,
    UNKNOWN,
    VM_ALLOCATION_POLICIES,
    VM_SCHEDULERS,
    StrategyEntry,
    StrategyFamily,
    StrategyRegistry,
)

__all__ = [
    "ConfigLoader",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "StrategyResolutionError",
    "UnknownMnemonic",
    "ClusterConsistencyError",
    "ReportWriteError",
    "REGISTRY",
    "STRATEGIES",
    "UNKNOWN",
    "StrategyEntry",
    "StrategyFamily",
    "StrategyRegistry",
    "VM_ALLOCATION_POLICIES",
    "VM_SCHEDULERS",
    "CLOUDLET_SCHEDULERS",
]
