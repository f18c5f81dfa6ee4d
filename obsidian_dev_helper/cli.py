"""
Obsidian Dev Helper Command Line Interface.

Builds an Obsidian plugin in watch mode, installs it into a vault
whenever the build output changes, and reloads it.
Requires Python 3.11+.

Usage:
    obsidian-dev-helper --vault ~/Notes
    obsidian-dev-helper --vault ~/Notes --build-command "yarn dev" --build-directory dist
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from obsidian_dev_helper import __version__
from obsidian_dev_helper.devloop import DevLoop
from obsidian_dev_helper.exceptions import DevHelperError
from obsidian_dev_helper.utils.config import Settings, get_settings
from obsidian_dev_helper.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

CAVEATS = """\
caveats:
  On macOS, Obsidian steals window focus whenever it receives an
  "obsidian:" URL event. You may wish to use --no-auto-reload there.

Every option can also be set through the environment, for example
DEVHELPER_VAULT_PATH, DEVHELPER_BUILD_COMMAND or DEVHELPER_RELOAD_ENABLED.
"""


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="obsidian-dev-helper",
        description=(
            "Automatically builds an Obsidian plugin, installs it to a vault, "
            "and reloads it."
        ),
        epilog=CAVEATS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to the Obsidian vault to install the plugin into (required)",
    )
    parser.add_argument(
        "--build-command",
        default=None,
        help='Watch-mode build command, usually "npm run dev" or "yarn dev" (default: "npm run dev")',
    )
    parser.add_argument(
        "--build-delay",
        type=float,
        default=None,
        metavar="SECONDS",
        help=(
            "Seconds to wait after the last build output change before installing, "
            "so a half-written build is never installed (default: 1)"
        ),
    )
    parser.add_argument(
        "--build-directory",
        type=Path,
        default=None,
        help="Build output directory holding main.js, styles.css and manifest.json (default: .)",
    )
    parser.add_argument(
        "--plugin-manifest",
        type=Path,
        default=None,
        help="Plugin manifest file (default: manifest.json inside the build directory)",
    )
    parser.add_argument(
        "--auto-reload",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reload the plugin in Obsidian after each install (default: on)",
    )
    parser.add_argument(
        "--polling",
        action="store_true",
        default=None,
        help="Poll for changes instead of using OS notifications (network drives, VMs)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Diagnostic log level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["console", "json"],
        help="Diagnostic log format (default: console)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _override(section: Any, **values: Any) -> Any:
    """Copy a settings section with the non-None values applied."""
    update = {k: v for k, v in values.items() if v is not None}
    if not update:
        return section
    # Validate the merged values the same way the environment is validated
    return type(section).model_validate({**section.model_dump(), **update})


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """
    Layer command line arguments over environment settings.

    Raises:
        ValidationError: If an argument value is out of range
    """
    return settings.model_copy(
        update={
            "vault": _override(settings.vault, path=args.vault),
            "build": _override(
                settings.build,
                command=args.build_command,
                delay_seconds=args.build_delay,
                directory=args.build_directory,
                manifest_file=args.plugin_manifest,
            ),
            "reload": _override(settings.reload, enabled=args.auto_reload),
            "watcher": _override(settings.watcher, use_polling=args.polling),
            "logging": _override(
                settings.logging,
                level=args.log_level,
                format=args.log_format,
            ),
        }
    )


def exit_status(returncode: int) -> int:
    """Map a subprocess return code to a shell exit status (signal N -> 128 + N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = apply_arguments(get_settings(), args)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        print(f"Error: invalid value for {fields}", file=sys.stderr)
        return 1

    configure_logging(settings)

    if settings.vault.path is None:
        print("Error: argument '--vault' is required", file=sys.stderr)
        return 1

    try:
        loop = DevLoop(settings)
        return exit_status(asyncio.run(loop.run()))
    except DevHelperError as e:
        logger.error("dev_loop_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
