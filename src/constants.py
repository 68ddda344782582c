"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INVALID_INPUT = 3


class Channels(Enum):
    """Pre-release channels published for script modules.

    Args:
        Enum (string): Channel identifiers as they appear in version strings.
    """

    BETA = "beta"
    RC = "rc"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    # Non-version keys of the packument "time" map
    IGNORED_TIME_KEYS = ["created", "modified"]
    # ASCII digits only
    TARGET_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+(\.[0-9]+)?$"
    BASELINE_VERSION = "0.0.0"
    SCRIPT_MODULES = [
        "@minecraft/server",
        "@minecraft/server-ui",
        "@minecraft/server-net",
        "@minecraft/server-admin",
        "@minecraft/server-gametest",
        "@minecraft/server-editor",
        "@minecraft/common",
    ]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
    MAX_CONCURRENCY = 4
    ENV_LOG_LEVEL = "SCRIPTDOCS_LOG_LEVEL"
    ENV_TARGETS = "VERSION"
    OUTPUT_FORMATS = ["json", "text"]
