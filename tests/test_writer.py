from __future__ import annotations

import datetime as dt
import os
from pathlib import Path

import pytest
from conftest import LOCAL_KUBECONFIG

from kubeconfig_patcher import writer
from kubeconfig_patcher.errors import WriteError
from kubeconfig_patcher.kubeconfig import parse_kubeconfig
from kubeconfig_patcher.writer import (
    TRY_MODE_HEADER,
    apply,
    backup_path_for,
    dump_kubeconfig,
    print_try_mode,
    write_backup,
    write_kubeconfig,
)

TODAY = dt.date(2025, 6, 5)


def test_backup_path_uses_date_stamp(tmp_path):
    path = tmp_path / "config"

    assert backup_path_for(path, TODAY) == tmp_path / "config.backup.20250605"


def test_dump_preserves_key_order():
    config = parse_kubeconfig(LOCAL_KUBECONFIG)

    keys = [line.split(":")[0] for line in dump_kubeconfig(config).splitlines() if line[:1].isalpha()]

    assert keys == ["apiVersion", "kind", "current-context", "preferences", "clusters", "contexts", "users"]


def test_write_backup_keeps_original_bytes_and_mode(local_path):
    original = b"# hand edited\n" + local_path.read_bytes()
    os.chmod(local_path, 0o600)

    backup = write_backup(local_path, original, TODAY)

    assert backup.read_bytes() == original
    assert backup.stat().st_mode & 0o777 == 0o600


def test_apply_writes_backup_then_config(local_path, capsys):
    original = local_path.read_bytes()
    config = parse_kubeconfig(original)
    config.user("prod-user").set("token", "tok-new")

    backup = apply(local_path, original, config, TODAY)

    assert backup.read_bytes() == original
    assert parse_kubeconfig(local_path.read_text()).user("prod-user").token == "tok-new"
    out = capsys.readouterr().out
    assert f"Backup saved to {backup}" in out
    assert f"Successfully updated {local_path}" in out


def test_backup_failure_leaves_config_untouched(local_path):
    original = local_path.read_bytes()
    backup_path_for(local_path, TODAY).mkdir()
    config = parse_kubeconfig(original)
    config.user("prod-user").set("token", "tok-new")

    with pytest.raises(WriteError, match="Error creating backup"):
        apply(local_path, original, config, TODAY)

    assert local_path.read_bytes() == original


def test_write_kubeconfig_failure(tmp_path):
    with pytest.raises(WriteError, match="Error writing updated config"):
        write_kubeconfig(tmp_path, "kind: Config\n")


def test_print_try_mode(capsys):
    config = parse_kubeconfig(LOCAL_KUBECONFIG)

    print_try_mode(config)

    out = capsys.readouterr().out
    assert TRY_MODE_HEADER in out
    assert parse_kubeconfig(out.split(TRY_MODE_HEADER, 1)[1]).data == config.data


def test_target_write_failure_keeps_backup(local_path, monkeypatch):
    original = local_path.read_bytes()
    config = parse_kubeconfig(original)
    config.user("prod-user").set("token", "tok-new")

    def fail_write_text(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "write_text", fail_write_text)

    with pytest.raises(WriteError, match="Error writing updated config"):
        apply(local_path, original, config, TODAY)

    assert backup_path_for(local_path, TODAY).read_bytes() == original
    assert local_path.read_bytes() == original


def test_backup_is_created_with_source_mode(local_path, monkeypatch):
    os.chmod(local_path, 0o600)
    modes = []

    def record_mode(src, dst):
        modes.append(Path(dst).stat().st_mode & 0o777)

    monkeypatch.setattr(writer.shutil, "copymode", record_mode)

    write_backup(local_path, local_path.read_bytes(), TODAY)

    assert modes and modes[0] & 0o077 == 0
