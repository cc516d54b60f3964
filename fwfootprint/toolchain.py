# ─── toolchain.py ─────────────────────────────────────────────────────────
"""Locating and running the binutils dump tools."""

from __future__ import annotations
import logging
import shutil
import subprocess
from typing import Optional, Sequence

from .errors import ToolchainError

log = logging.getLogger(__name__)


def find_tool(name: str, prefix: str = "") -> str:
    """`<prefix><name>` if it is on PATH, else the plain host tool."""
    for candidate in (prefix + name, name):
        if candidate and shutil.which(candidate):
            return candidate
    raise ToolchainError(f"cannot find {prefix + name!r} on PATH")


def run_tool(cmd: Sequence[str]) -> str:
    """Run a dump tool to completion and return its stdout."""
    log.debug("running %s", " ".join(str(c) for c in cmd))
    try:
        result = subprocess.run([str(c) for c in cmd], text=True, capture_output=True)
    except OSError as e:
        raise ToolchainError(f"{cmd[0]}: {e}") from e
    if result.returncode:
        raise ToolchainError(f"{cmd[0]} returned {result.returncode}: {result.stderr.strip()}")
    return result.stdout


class Toolchain:
    """nm and objdump for one target."""

    def __init__(self, prefix: str = "", nm: Optional[str] = None, objdump: Optional[str] = None):
        self.prefix = prefix
        self.nm = nm or find_tool("nm", prefix)
        self.objdump = objdump or find_tool("objdump", prefix)

    def symbols_with_lines(self, elf) -> str:
        """Format A: size-sorted symbols with `file:line`."""
        return run_tool([self.nm, "-S", "-l", "--size-sort", elf])

    def symbol_table(self, elf) -> str:
        """Format B: symbol table with sections."""
        return run_tool([self.objdump, "-tw", elf])

    def section_headers(self, elf) -> str:
        return run_tool([self.objdump, "-h", "-w", elf])
