"""Command-line interface for kubeconfig-patcher."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape

from kubeconfig_patcher import __version__
from kubeconfig_patcher.config import Settings
from kubeconfig_patcher.errors import PatcherError
from kubeconfig_patcher.kubeconfig import DEFAULT_KUBECONFIG, read_kubeconfig
from kubeconfig_patcher.merge import merge_credentials
from kubeconfig_patcher.prompts import Prompter
from kubeconfig_patcher.report import print_changes
from kubeconfig_patcher.selector import choose_target, read_pasted, resolve_sources
from kubeconfig_patcher.writer import apply, print_try_mode

logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

console = Console(stderr=True)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kubeconfig-patcher",
        description=(
            "Update one context of a kubeconfig with the cluster and user "
            "credentials from a pasted kubeconfig"
        ),
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_KUBECONFIG,
        help="Path to kubeconfig file (default: ~/.kube/config)",
    )
    parser.add_argument(
        "--try",
        dest="try_mode",
        action="store_true",
        help="Try mode: do not update the file, just print the result",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def run(settings: Settings, prompter: Prompter) -> int:
    original, local = read_kubeconfig(settings.config_path)

    target = choose_target(local, prompter)
    pasted = read_pasted(prompter)
    sources = resolve_sources(pasted, target, prompter)

    changes = merge_credentials(local, target, sources)
    print_changes(changes)

    if settings.try_mode:
        print_try_mode(local)
        return 0

    apply(settings.config_path, original, local)
    return 0


def main(argv: list[str] | None = None, prompter: Prompter | None = None) -> int:
    try:
        args = parse_args(argv)
        settings = Settings.from_args(args)

        if settings.verbose:
            logging.getLogger().setLevel(logging.INFO)

        return run(settings, prompter or Prompter(console))

    except PatcherError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]", soft_wrap=True)
        return 1
    except Exception as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]", soft_wrap=True)
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
