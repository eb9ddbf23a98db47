"""Serialize the merged kubeconfig and write it, or print it in try mode."""

from __future__ import annotations

import datetime as dt
import logging
import os
import shutil
from pathlib import Path

import yaml

from kubeconfig_patcher.errors import WriteError
from kubeconfig_patcher.kubeconfig import Kubeconfig

logger = logging.getLogger(__name__)

TRY_MODE_HEADER = "---- Updated kubeconfig (try mode) ----"


def dump_kubeconfig(config: Kubeconfig) -> str:
    try:
        return yaml.safe_dump(
            config.data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    except yaml.YAMLError as exc:
        raise WriteError(f"Error marshaling config: {exc}") from exc


def backup_path_for(path: Path, today: dt.date | None = None) -> Path:
    today = today or dt.date.today()
    return Path(f"{path}.backup.{today.strftime('%Y%m%d')}")


def write_backup(path: Path, original: bytes, today: dt.date | None = None) -> Path:
    """Write the bytes originally read from ``path`` next to it, keeping its mode."""
    backup_path = backup_path_for(path, today)
    try:
        mode = path.stat().st_mode & 0o777
        fd = os.open(backup_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as handle:
            handle.write(original)
        # an existing backup keeps its old mode on reopen
        shutil.copymode(path, backup_path)
    except OSError as exc:
        raise WriteError(f"Error creating backup {backup_path}: {exc}") from exc
    logger.info(f"Backup created at {backup_path}")
    return backup_path


def write_kubeconfig(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Error writing updated config {path}: {exc}") from exc
    logger.info(f"Wrote {len(content)} characters to {path}")


def print_try_mode(config: Kubeconfig) -> None:
    content = dump_kubeconfig(config)
    print(f"\n{TRY_MODE_HEADER}")
    print(content)


def apply(path: Path, original: bytes, config: Kubeconfig, today: dt.date | None = None) -> Path:
    """Back up ``path`` and overwrite it with ``config``. Returns the backup path.

    The target is never written unless the backup succeeded.
    """
    content = dump_kubeconfig(config)
    backup_path = write_backup(path, original, today)
    print(f"Backup saved to {backup_path}")
    write_kubeconfig(path, content)
    print(f"Successfully updated {path}")
    return backup_path
