"""NPM registry client: publish history of script modules."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from versioning.errors import RegistryError

logger = logging.getLogger(__name__)

# The abbreviated install-v1 document omits the "time" map
PACKUMENT_HEADERS = {"Accept": "application/json"}


def packument_url(module: str, registry_url: str = Constants.REGISTRY_URL_NPM) -> str:
    """Build the packument URL, keeping the scope marker of scoped names."""
    return registry_url.rstrip("/") + "/" + quote(module, safe="@")


def strip_bookkeeping(time_map: Dict[str, str]) -> Dict[str, str]:
    """Return a copy of ``time_map`` without the created/modified keys."""
    return {k: v for k, v in time_map.items() if k not in Constants.IGNORED_TIME_KEYS}


def _extract_time_map(module: str, status_code: int, packument: Optional[Any]) -> Dict[str, str]:
    if status_code == 0:
        raise RegistryError(module, "no response from registry", status_code)
    if status_code == 404:
        raise RegistryError(module, "package not found", status_code)
    if status_code != 200:
        raise RegistryError(module, f"unexpected status code ({status_code})", status_code)
    if packument is None:
        raise RegistryError(module, "undecodable response", status_code)
    if not isinstance(packument, dict):
        raise RegistryError(module, "packument is not a JSON object", status_code)
    time_map = packument.get("time")
    if not isinstance(time_map, dict):
        raise RegistryError(module, "packument has no publish history", status_code)
    return strip_bookkeeping(time_map)


def fetch_publish_history(
    module: str, registry_url: str = Constants.REGISTRY_URL_NPM
) -> Dict[str, str]:
    """Fetch the publish history (version -> ISO-8601 instant) of ``module``.

    Raises:
        RegistryError: when the registry does not return a usable packument.
    """
    url = packument_url(module, registry_url)
    with Timer() as timer:
        status_code, _, data = get_json(url, headers=PACKUMENT_HEADERS)
    if is_debug_enabled(logger):
        logger.debug(
            "Fetched packument",
            extra=extra_context(
                event="http_response",
                component="client",
                action="GET",
                status_code=status_code,
                duration_ms=timer.duration_ms(),
                target=safe_url(url),
                package_manager="npm"
            )
        )
    return _extract_time_map(module, status_code, data)
