"""Resolution of the module versions that apply to a target.

Given the publish history of a script module (compound version -> publish
instant), pick the stable releases, the newest beta and the newest rc that
were built against the requested engine version.

Recency comes only from publish instants. Version comparison is used for
filtering: a pre-release counts only when its module version is newer than
the stable release it is measured against.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from constants import Channels, Constants
from common.logging_utils import extra_context, is_debug_enabled
from common.timestamps import publish_sort_key
from registry.npm.client import fetch_publish_history, strip_bookkeeping
from .codec import compare_versions, parse_target, split_version, versions_equal
from .models import ResolutionResult, SplitVersion

logger = logging.getLogger(__name__)

Selection = Tuple[Optional[str], Optional[str], List[str]]


def sort_by_publish_time(publish_history: Dict[str, str]) -> List[str]:
    """Return the versions of ``publish_history``, most recently published first."""
    ordered = sorted(publish_history, key=lambda v: publish_sort_key(publish_history[v]))
    ordered.reverse()
    return ordered


def _find_prerelease(
    prereleases: List[Tuple[str, SplitVersion]],
    channel: str,
    baseline: str,
    wanted_engine: str,
) -> Optional[str]:
    """First pre-release on ``channel`` newer than ``baseline`` built for ``wanted_engine``."""
    for version, split in prereleases:
        if split.channel != channel:
            continue
        if compare_versions(split.module_version, baseline) != 1:
            continue
        if versions_equal(split.engine_version, wanted_engine):
            return version
    return None


def select_versions(publish_history: Dict[str, str], target: str) -> Selection:
    """Compute (latest_beta, latest_rc, stable_versions) for ``target``.

    Raises:
        InvalidTargetError: if ``target`` is not a valid target coordinate.
    """
    wanted_engine = parse_target(target).canonical

    stable: List[str] = []
    prereleases: List[Tuple[str, SplitVersion]] = []
    for version in sort_by_publish_time(publish_history):
        split = split_version(version)
        if split is None:
            logger.debug("Skipping unparseable version %r", version)
            continue
        if split.is_stable:
            stable.append(version)
        else:
            prereleases.append((version, split))

    # None stands for the synthetic baseline 0.0.0
    baselines: List[Optional[str]] = [None, *stable]
    latest_beta = None
    while baselines:
        baselines.pop(0)
        baseline = baselines[0] if baselines else Constants.BASELINE_VERSION
        latest_beta = _find_prerelease(prereleases, Channels.BETA.value, baseline, wanted_engine)
        if latest_beta:
            break

    baseline = baselines[0] if baselines else Constants.BASELINE_VERSION
    latest_rc = _find_prerelease(prereleases, Channels.RC.value, baseline, wanted_engine)

    if is_debug_enabled(logger):
        logger.debug(
            "Selected versions",
            extra=extra_context(
                event="decision",
                component="resolver",
                action="select_versions",
                target=target,
                baseline=baseline,
                latest_beta=latest_beta,
                latest_rc=latest_rc,
                stable_count=len(stable),
            )
        )
    return latest_beta, latest_rc, stable


def resolve(publish_history: Dict[str, str], target: str) -> List[Optional[str]]:
    """Return ``[latest_beta, latest_rc (if found), *stable]`` for ``target``.

    ``latest_beta`` is kept as a positional None when no beta matches.
    """
    latest_beta, latest_rc, stable = select_versions(publish_history, target)
    versions: List[Optional[str]] = [latest_beta]
    if latest_rc:
        versions.append(latest_rc)
    versions.extend(stable)
    return versions


class ScriptModuleResolver:
    """Fetch a module's publish history and resolve it for a target."""

    def __init__(
        self,
        registry_url: str = Constants.REGISTRY_URL_NPM,
        fetch_history: Optional[Callable[..., Dict[str, str]]] = None,
    ):
        self.registry_url = registry_url
        self._fetch_history = fetch_history or fetch_publish_history

    def versions_for(self, module: str, target: str) -> ResolutionResult:
        """Resolve ``module`` for ``target``.

        The target is validated before the registry is contacted. Registry
        failures propagate as RegistryError.
        """
        parse_target(target)
        history = strip_bookkeeping(self._fetch_history(module, registry_url=self.registry_url))
        return build_result(module, target, history)


def build_result(module: str, target: str, publish_history: Dict[str, str]) -> ResolutionResult:
    """Resolve an already fetched history into a ResolutionResult."""
    latest_beta, latest_rc, stable = select_versions(publish_history, target)
    logger.info(
        "%s@%s: beta=%s rc=%s stable=%d",
        module, target, latest_beta, latest_rc, len(stable),
    )
    return ResolutionResult(
        module=module,
        target=target,
        latest_beta=latest_beta,
        latest_rc=latest_rc,
        stable=stable,
    )
