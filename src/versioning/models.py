"""Data models for versioning and version resolution."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class SplitVersion:
    """A compound publish version decoded into its two coordinates.

    ``engine_version`` is empty for stable releases, which apply to every
    target.
    """
    module_version: str
    engine_version: str

    @property
    def is_stable(self) -> bool:
        """True for releases that carry no target coordinate."""
        return self.engine_version == ""

    @property
    def channel(self) -> Optional[str]:
        """Pre-release channel (beta, rc) or None for stable releases."""
        if "-" not in self.module_version:
            return None
        return self.module_version.split("-", 1)[1]


@dataclass(frozen=True)
class TargetCoordinate:
    """Platform release a caller wants matching module versions for."""
    major: int
    minor: int
    patch: int
    revision: Optional[int] = None

    @property
    def is_preview(self) -> bool:
        return self.revision is not None

    @property
    def canonical(self) -> str:
        """Engine version string as embedded in pre-release versions."""
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision is None:
            return f"{base}-stable"
        return f"{base}-preview.{self.revision}"

    def __str__(self) -> str:
        parts = [self.major, self.minor, self.patch]
        if self.revision is not None:
            parts.append(self.revision)
        return ".".join(str(p) for p in parts)


@dataclass
class ResolutionResult:
    """Resolution outcome for one module and one target."""
    module: str
    target: str
    latest_beta: Optional[str] = None
    latest_rc: Optional[str] = None
    stable: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def versions(self) -> List[Optional[str]]:
        """Ordered versions; position 0 is reserved for the beta even when absent."""
        ordered: List[Optional[str]] = [self.latest_beta]
        if self.latest_rc:
            ordered.append(self.latest_rc)
        ordered.extend(self.stable)
        return ordered
