"""
colmat Config - Global Configuration System

Holds the defaults that several modules share: comparison tolerances,
text formats and the seed policy for random value sources. Values can be
changed globally or overridden per thread inside a ``config.local(...)``
block.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, asdict, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np

logger = logging.getLogger("colmat.config")


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ToleranceConfig:
    """Tolerances used by ``allclose``.

    Two values a, b are close when ``|a - b| <= abstol + reltol*|b|``.
    """
    abstol: float = 1e-8
    reltol: float = 1.0000000000000001e-05


@dataclass
class FormatConfig:
    """Printf-style element formats."""
    element_format: str = "%9.2e"   # str(matrix)
    json_format: str = "%.16e"      # to_json, round-trip exact


@dataclass
class RandomConfig:
    """Seed policy for random value sources.

    With ``seed=None`` every source draws fresh OS entropy. With an integer
    seed, sources created without an explicit seed get child seeds spawned
    from it, which makes a whole run reproducible.
    """
    seed: Optional[int] = None
    _sequence: Optional[np.random.SeedSequence] = field(
        default=None, init=False, repr=False, compare=False)

    def spawn(self) -> Optional[np.random.SeedSequence]:
        """Next child seed, or None when no global seed is set."""
        if self.seed is None:
            return None
        if self._sequence is None:
            self._sequence = np.random.SeedSequence(self.seed)
        return self._sequence.spawn(1)[0]


def _seed_from_env() -> Optional[int]:
    raw = os.environ.get("COLMAT_SEED", "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.debug("Ignoring non-integer COLMAT_SEED=%r", raw)
        return None


# =============================================================================
# Global Configuration Manager
# =============================================================================

class ColmatConfig:
    """
    Global configuration manager for colmat.

    Example:
        # Global configuration
        colmat.config.tolerance = ToleranceConfig(abstol=1e-12)

        # Local configuration (context manager)
        with colmat.config.local(tolerance=ToleranceConfig(abstol=1e-3)):
            A.allclose(B)
        # Back to global config
    """

    def __init__(self):
        self._global_tolerance = ToleranceConfig()
        self._global_format = FormatConfig()
        self._global_random = RandomConfig(seed=_seed_from_env())

        # Thread-local storage for context overrides
        self._local = threading.local()

        self._callbacks: Dict[str, List[Callable]] = {
            "tolerance": [],
            "format": [],
            "random": [],
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def tolerance(self) -> ToleranceConfig:
        """Get tolerance configuration."""
        if getattr(self._local, "tolerance", None) is not None:
            return self._local.tolerance
        return self._global_tolerance

    @tolerance.setter
    def tolerance(self, value: ToleranceConfig):
        self._global_tolerance = value
        self._notify("tolerance", value)

    @property
    def format(self) -> FormatConfig:
        """Get format configuration."""
        if getattr(self._local, "format", None) is not None:
            return self._local.format
        return self._global_format

    @format.setter
    def format(self, value: FormatConfig):
        self._global_format = value
        self._notify("format", value)

    @property
    def random(self) -> RandomConfig:
        """Get random source configuration."""
        if getattr(self._local, "random", None) is not None:
            return self._local.random
        return self._global_random

    @random.setter
    def random(self, value: RandomConfig):
        self._global_random = value
        self._notify("random", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def abstol(self) -> float:
        return self.tolerance.abstol

    @property
    def reltol(self) -> float:
        return self.tolerance.reltol

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (tolerance, format, random)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._callbacks)
        if unknown:
            raise TypeError(f"Unknown configuration section(s): {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config ("tolerance", "format", "random")
            callback: Function to call with the new section value
        """
        if config_name in self._callbacks:
            self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        for callback in self._callbacks.get(config_name, []):
            callback(value)

    # -------------------------------------------------------------------------
    # Reset / Export
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_tolerance = ToleranceConfig()
        self._global_format = FormatConfig()
        self._global_random = RandomConfig(seed=_seed_from_env())

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "tolerance": asdict(self.tolerance),
            "format": asdict(self.format),
            "random": {"seed": self.random.seed},
        }

    def __repr__(self) -> str:
        return f"ColmatConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for thread-local configuration overrides."""

    def __init__(self, config: ColmatConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._saved: Dict[str, Any] = {}

    def __enter__(self) -> ColmatConfig:
        for key in self._kwargs:
            self._saved[key] = getattr(self._config._local, key, None)
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._config._clear_local(list(self._kwargs))
        self._config._set_local(**self._saved)


# Global configuration instance
config = ColmatConfig()
