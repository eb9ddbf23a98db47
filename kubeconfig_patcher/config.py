"""Run-time settings resolved once from the command line."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from kubeconfig_patcher.kubeconfig import resolve_path


@dataclass(frozen=True)
class Settings:
    config_path: Path
    try_mode: bool = False
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Settings:
        return cls(
            config_path=resolve_path(args.config),
            try_mode=args.try_mode,
            verbose=args.verbose,
        )
