"""scriptdocs - resolve which script module versions apply to a game version.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from constants import Constants, ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import ConfigError, build_runtime_config
from versioning.codec import is_valid_target
from versioning.errors import InvalidTargetError
from versioning.service import VersionResolutionService

logger = logging.getLogger(__name__)


def _setup_logging(args):
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def render_json(results):
    """Group results as {target: {module: versions}}."""
    grouped = {}
    for result in results:
        entry = result.versions if result.error is None else {"error": result.error}
        grouped.setdefault(result.target, {})[result.module] = entry
    return json.dumps(grouped, indent=2)


def render_text(results):
    """One line per module and target."""
    lines = []
    for result in results:
        if result.error is not None:
            lines.append(f"{result.target}  {result.module}  ERROR: {result.error}")
            continue
        stable = ", ".join(result.stable) or "-"
        lines.append(
            f"{result.target}  {result.module}  beta={result.latest_beta or '-'}  "
            f"rc={result.latest_rc or '-'}  stable={stable}"
        )
    return "\n".join(lines)


def write_output(text, path=None):
    """Write ``text`` to ``path`` or stdout."""
    if not path:
        print(text)
        return
    try:
        with open(path, "w", encoding="utf-8") as file:
            file.write(text + "\n")
    except OSError as e:
        logging.error("Could not write output file %s: %s", path, e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    logging.info("Wrote results to %s", path)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = build_runtime_config(args)
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if not config.targets:
        logging.error("No version specified. Pass --target or set VERSION.")
        sys.exit(ExitCodes.INVALID_INPUT.value)

    # Reject malformed input before any registry request
    for target in config.targets:
        if not is_valid_target(target):
            logging.error("%s", InvalidTargetError(target))
            sys.exit(ExitCodes.INVALID_INPUT.value)

    service = VersionResolutionService(
        registry_url=config.registry_url,
        max_concurrency=config.max_concurrency,
    )
    results = service.resolve_targets(config.targets, config.modules)

    if args.OUTPUT_FORMAT == "text":
        write_output(render_text(results), args.OUTPUT)
    else:
        write_output(render_json(results), args.OUTPUT)

    failures = [r for r in results if r.error is not None]
    if failures:
        logging.warning("%d of %d resolutions failed.", len(failures), len(results))
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
