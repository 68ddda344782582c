"""Exceptions raised by version resolution and registry access."""

from typing import Optional


class ResolutionError(Exception):
    """Base class for resolution failures."""


class InvalidTargetError(ResolutionError, ValueError):
    """Caller supplied a target that is not ``M.m.p`` or ``M.m.p.r``."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(
            f"Invalid version: {target!r}. Accept '0.0.0' for stable, '0.0.0.0' for preview."
        )


class RegistryError(ResolutionError):
    """The registry did not return a usable publish history."""

    def __init__(self, module: str, message: str, status_code: Optional[int] = None):
        self.module = module
        self.status_code = status_code
        super().__init__(f"{module}: {message}")
