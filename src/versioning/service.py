"""Batch resolution of many script modules against one or more targets."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Iterable, List, Optional, Sequence

from constants import Constants
from .codec import parse_target
from .errors import RegistryError
from .models import ResolutionResult
from .resolver import ScriptModuleResolver

logger = logging.getLogger(__name__)


class VersionResolutionService:
    """Resolve module versions concurrently across modules.

    Modules are independent: each fetch-and-resolve runs on a worker thread
    and a registry failure is recorded on that module's result only.
    """

    def __init__(
        self,
        registry_url: str = Constants.REGISTRY_URL_NPM,
        max_concurrency: int = Constants.MAX_CONCURRENCY,
        resolver: Optional[ScriptModuleResolver] = None,
    ):
        self.registry_url = registry_url
        self.max_concurrency = max(1, int(max_concurrency))
        self.resolver = resolver or ScriptModuleResolver(registry_url)

    def _resolve_one(self, module: str, target: str) -> ResolutionResult:
        try:
            return self.resolver.versions_for(module, target)
        except RegistryError as exc:
            logger.warning("Failed to resolve %s@%s: %s", module, target, exc)
            return ResolutionResult(module=module, target=target, error=str(exc))

    def resolve_modules(self, modules: Sequence[str], target: str) -> List[ResolutionResult]:
        """Resolve every module for ``target``; results follow ``modules`` order."""
        parse_target(target)
        if not modules:
            return []
        workers = min(self.max_concurrency, len(modules))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._resolve_one, module, target) for module in modules]
            return [future.result() for future in futures]

    def resolve_targets(
        self, targets: Iterable[str], modules: Sequence[str]
    ) -> List[ResolutionResult]:
        """Resolve ``modules`` for each target in turn.

        Every target is validated before the first registry request.

        Raises:
            InvalidTargetError: for the first malformed target.
        """
        targets = list(targets)
        for target in targets:
            parse_target(target)
        results: List[ResolutionResult] = []
        for target in targets:
            logger.info("Resolving %d modules for version %s...", len(modules), target)
            results.extend(self.resolve_modules(modules, target))
        return results
