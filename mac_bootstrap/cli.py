"""Entry points for the mac-keypair and mac-defaults command line tools."""

from __future__ import annotations

import argparse
from functools import partial
import logging
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import BootstrapConfig
from .errors import ProvisionError
from .formatting import error
from .keypair import ProvisionContext, run_key_provisioner
from .preferences import run_preference_setter
from .runner import CommandRunner

INTERRUPTED = 130


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )


def keypair_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Generate a GitHub SSH key, add it to the macOS keychain and set the git identity.")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    console = Console()
    ctx = ProvisionContext(
        config=BootstrapConfig.from_env(),
        runner=CommandRunner(),
        console=console,
        ask=partial(console.input, markup=False),
    )
    return _guarded(console, lambda: run_key_provisioner(ctx))


def preferences_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Write macOS system preferences and bootstrap Homebrew.")
    parser.add_argument("--skip-brew", action="store_true", help="do not run the Homebrew installer")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    console = Console()
    return _guarded(
        console,
        lambda: run_preference_setter(
            BootstrapConfig.from_env(), CommandRunner(), console, install_brew=not args.skip_brew
        ),
    )


def _base_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-v", "--verbose", action="store_true", help="log every command before it runs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _guarded(console: Console, run: Callable[[], int]) -> int:
    try:
        return run()
    except ProvisionError as exc:
        error(console, str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        console.print()
        error(console, "Interrupted.")
        return INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(keypair_main())
