"""Shared test fixtures: small Dart projects written into tmp_path."""

import os
import textwrap
from pathlib import Path

import pytest

FEATURES = "lib/features"


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: content}`` under root (content is dedented)."""
    for relpath, content in files.items():
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return root


def sized_dart(total_lines: int, class_name: str, directive: str = "") -> str:
    """Dart source of exactly ``total_lines`` lines declaring one class."""
    head = [directive] if directive else []
    filler = total_lines - len(head) - 2
    lines = head + [f"class {class_name} {{"]
    lines += [f"  final int field{i} = {i};" for i in range(filler)]
    lines.append("}")
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user and project config files and LAYERLINT_* vars out of tests."""
    home = tmp_path / "_home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(home)
    for key in list(os.environ):
        if key.startswith("LAYERLINT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def project(tmp_path):
    """Factory: write feature files (keys relative to lib/features) and return the root."""
    root = tmp_path / "app"
    root.mkdir()

    def _make(features: dict[str, str], extra: dict[str, str] | None = None) -> Path:
        write_files(root, {f"{FEATURES}/{k}": v for k, v in features.items()})
        if extra:
            write_files(root, extra)
        return root

    return _make
