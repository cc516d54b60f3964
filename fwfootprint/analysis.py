# ─── analysis.py ──────────────────────────────────────────────────────────
"""From dump text to ROM / RAM size trees."""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import MissingArtifactError
from .sections import (SectionInfo, flash_sections, parse_section_headers,
                       ram_sections, sections_total)
from .symbols import SymbolRecord, filter_sections, join_symbols, load_symbol_paths, parse_symbol_table
from .tree import PathTree, build_tree

log = logging.getLogger(__name__)


@dataclass
class MemoryTrees:
    rom: PathTree
    ram: PathTree
    sections: List[SectionInfo] = field(default_factory=list)
    records: List[SymbolRecord] = field(default_factory=list)

    @property
    def loaded_sections_total(self) -> int:
        return sections_total(self.sections, flash_sections(self.sections))

    @property
    def ram_sections_total(self) -> int:
        return sections_total(self.sections, ram_sections(self.sections))


def analyze_dumps(nm_text: str, symbols_text: str, headers_text: str,
                  source_dir: Optional[str] = None) -> MemoryTrees:
    """
    Build the ROM and RAM trees from the three dumps.

    A symbol lands in the ROM tree if its section is LOAD, in the RAM tree if
    its section is writable ALLOC; .data symbols are in both.
    """
    sections = parse_section_headers(headers_text)
    rom_names = flash_sections(sections)
    ram_names = ram_sections(sections)
    log.info("flash sections: %s", ", ".join(sorted(rom_names)) or "-")
    log.info("RAM sections: %s", ", ".join(sorted(ram_names)) or "-")

    paths = load_symbol_paths(nm_text, source_dir)
    records = join_symbols(parse_symbol_table(symbols_text), paths)

    rom = build_tree(filter_sections(records, rom_names))
    ram = build_tree(filter_sections(records, ram_names))
    return MemoryTrees(rom=rom, ram=ram, sections=sections, records=records)


def analyze_elf(toolchain, elf_file, source_dir: Optional[str] = None) -> MemoryTrees:
    if not elf_file.exists():
        raise MissingArtifactError(elf_file)
    return analyze_dumps(
        toolchain.symbols_with_lines(elf_file),
        toolchain.symbol_table(elf_file),
        toolchain.section_headers(elf_file),
        source_dir,
    )
