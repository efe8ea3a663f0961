"""Shared fixtures: template trees on disk and a config rooted at them."""

from collections.abc import Callable
from pathlib import Path

import pytest

from ganglion.config import AppConfig
from ganglion.registry import NodeRegistry

type WriteFiles = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_files(tmp_path: Path) -> WriteFiles:
    """Write ``{relative_path: content}`` under tmp_path and return the root."""

    def write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return write


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(root=str(tmp_path))


@pytest.fixture
def registry() -> NodeRegistry:
    return NodeRegistry()
