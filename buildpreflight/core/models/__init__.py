"""
Domain models — Pydantic types for the preflight.

All models are re-exported here for convenient access:

    from buildpreflight.core.models import BuildConfiguration, CheckOutcome
"""

from buildpreflight.core.models.config import BuildConfiguration, TargetConfig
from buildpreflight.core.models.outcome import CheckOutcome, ConfigOverrides, apply_overrides
from buildpreflight.core.models.platform import PlatformFamily, host_is_windows

__all__ = [
    # config.py
    "BuildConfiguration",
    # outcome.py
    "CheckOutcome",
    "ConfigOverrides",
    # platform.py
    "PlatformFamily",
    "TargetConfig",
    "apply_overrides",
    "host_is_windows",
]
