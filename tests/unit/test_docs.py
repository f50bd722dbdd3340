"""The Sphinx sources document every public module."""

from __future__ import annotations

import importlib
import re
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
DOCS = ROOT / "docs"
PACKAGE = ROOT / "src" / "agent_elicitation"

# Entry points and package markers with nothing to document.
UNDOCUMENTED = {"agent_elicitation.cli", "agent_elicitation.main"}


def _documented_modules() -> list[str]:
    text = (DOCS / "api.rst").read_text(encoding="utf-8")
    return re.findall(r"^\.\. automodule:: (\S+)$", text, flags=re.MULTILINE)


def test_index_links_the_api_page() -> None:
    index = (DOCS / "index.rst").read_text(encoding="utf-8")

    assert ".. toctree::" in index
    assert re.search(r"^\s+api$", index, flags=re.MULTILINE)


def test_every_module_is_documented() -> None:
    modules = {
        ".".join(path.relative_to(PACKAGE.parent).with_suffix("").parts)
        for path in PACKAGE.rglob("*.py")
        if path.name != "__init__.py"
    }

    assert modules - UNDOCUMENTED <= set(_documented_modules())


@pytest.mark.parametrize("module", _documented_modules())
def test_documented_module_imports(module: str) -> None:
    importlib.import_module(module)
