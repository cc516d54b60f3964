# ─── sections.py ──────────────────────────────────────────────────────────
"""
Section classification and whole-image totals.

Flash candidates are the sections objdump tags LOAD. RAM candidates are
ALLOC sections that are neither READONLY nor CODE and do not look like rodata.
The flash total of a build is the size of the .bin on disk; the RAM total is
summed from well-known sections of the readelf `.stat` dump.
"""

from __future__ import annotations
import os
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, NamedTuple, Set

# Sections whose sizes add up to the RAM used on target
RAM_SECTION_NAMES = (
    "noinit", "bss", "initlevel", "datas", ".data",
    ".heap", ".stack", ".bss", ".panic_section",
)

# objdump -h:  "  3 datas  00000120  20000000  00005a10  00005b04  2**2  [flags]"
_HEADER_RE = re.compile(
    r"^\s*(\d+)\s+(\S+)\s+([0-9a-fA-F]+)\s+[0-9a-fA-F]+\s+[0-9a-fA-F]+"
    r"\s+[0-9a-fA-F]+\s+\S+(.*)$"
)


@dataclass(frozen=True)
class SectionInfo:
    name: str
    size: int
    flags: FrozenSet[str] = frozenset()

    @property
    def is_flash(self) -> bool:
        return "LOAD" in self.flags

    @property
    def is_ram(self) -> bool:
        if "ALLOC" not in self.flags:
            return False
        if "READONLY" in self.flags or "CODE" in self.flags:
            return False
        return "rodata" not in self.name


def _parse_flags(text: str) -> FrozenSet[str]:
    return frozenset(f.strip() for f in text.split(",") if f.strip())


def parse_section_headers(text: str) -> List[SectionInfo]:
    """
    Parse `objdump -h` output.

    Accepts the wide layout (`-w`, flags at the end of the line) as well as
    the default one where the flags sit alone on the following line.
    """
    sections = []
    pending = None
    for line in text.splitlines():
        m = _HEADER_RE.match(line)
        if m:
            if pending is not None:
                sections.append(SectionInfo(pending[0], pending[1]))
            name, size = m.group(2), int(m.group(3), 16)
            flags = m.group(4).strip()
            if flags:
                sections.append(SectionInfo(name, size, _parse_flags(flags)))
                pending = None
            else:
                pending = (name, size)
        elif pending is not None and line.strip():
            sections.append(SectionInfo(pending[0], pending[1], _parse_flags(line)))
            pending = None
    if pending is not None:
        sections.append(SectionInfo(pending[0], pending[1]))
    return sections


def flash_sections(sections: Iterable[SectionInfo]) -> Set[str]:
    return {s.name for s in sections if s.is_flash}


def ram_sections(sections: Iterable[SectionInfo]) -> Set[str]:
    return {s.name for s in sections if s.is_ram}


def sections_total(sections: Iterable[SectionInfo], names: Iterable[str]) -> int:
    wanted = set(names)
    return sum(s.size for s in sections if s.name in wanted)


# ────────────────────── .stat file (readelf -e) ────────────────

def get_section_size(stat_text: str, section_name: str) -> int:
    """
    Size of `section_name` from a readelf section-header summary, 0 if absent.

        [ 5] bss   NOBITS   20000340 0061a8 000a10 00  WA  0   0  8
                                                  ^^^^^^ size
    """
    pattern = (r"^\s*\[\s*\d+\]\s+" + re.escape(section_name) +
               r"\s+\S+\s+[0-9a-fA-F]+\s+[0-9a-fA-F]+\s+([0-9a-fA-F]+)")
    m = re.search(pattern, stat_text, re.MULTILINE)
    if m is None:
        return 0
    return int(m.group(1), 16)


def total_ram_usage(stat_text: str) -> int:
    return sum(get_section_size(stat_text, name) for name in RAM_SECTION_NAMES)


class Footprint(NamedTuple):
    total_flash: int
    percent_flash: float
    total_ram: int
    percent_ram: float


def get_footprint(bin_file, stat_file, flash_capacity: int = 0, ram_capacity: int = 0) -> Footprint:
    """Flash from the raw .bin size, RAM from the .stat dump."""
    with open(stat_file, "r", encoding="utf-8", errors="replace") as f:
        stat_text = f.read()

    total_flash = os.path.getsize(bin_file)
    total_ram = total_ram_usage(stat_text)

    percent_flash = 100 * total_flash / flash_capacity if flash_capacity > 0 else 0.0
    percent_ram = 100 * total_ram / ram_capacity if ram_capacity > 0 else 0.0
    return Footprint(total_flash, percent_flash, total_ram, percent_ram)
