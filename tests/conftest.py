from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from docindex import SidebarIndex, codec

FIXTURES = Path(__file__).parent / "_fixtures"

SAMPLE_MAPPING = {
    "enum": [
        ["Mangling", "The symbol name mangling scheme."],
        ["StandardSection", "A standard section kind."],
    ],
    "mod": [["elf", "Support for writing ELF files."], ["pe", "Helper for writing PE files."]],
    "struct": [
        ["Comdat", "A COMDAT section group."],
        ["Object", "A writable object file."],
    ],
    "trait": [["WritableBuffer", "Trait for writable buffer."]],
    "type": [["Result", "The result type used within the write module."]],
}


@pytest.fixture
def sample_index() -> SidebarIndex:
    """Small index mirroring the write module sidebar."""
    return SidebarIndex.from_mapping(SAMPLE_MAPPING)


@pytest.fixture
def sidebar_script(tmp_path: Path) -> Path:
    """Copy of a real rustdoc sidebar-items.js placed under tmp_path."""
    target = tmp_path / "sidebar-items.js"
    shutil.copyfile(FIXTURES / "sidebar-items.js", target)
    return target


@pytest.fixture
def script_index(sidebar_script: Path) -> SidebarIndex:
    return codec.load(sidebar_script)
