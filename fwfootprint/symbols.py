# ─── symbols.py ───────────────────────────────────────────────────────────
"""
Symbol extraction from toolchain dumps.

No single dump carries everything we need, so two are combined:

* `nm -S -l --size-sort` (format A) maps symbol names to source files:
      00001a2c 00000040 T spi_init	/src/drivers/spi/spi.c:42
* `objdump -tw` (format B) gives the section and size of each symbol:
      00001a2c g     F text	00000040 spi_init
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional

log = logging.getLogger(__name__)

UNCLASSIFIED = ":"                 # top-level key for symbols without a known source
OBJDUMP_FLAG_WIDTH = 7             # l/g, w, C, W, I, d/D, F/f/O


@dataclass(frozen=True)
class SymbolRecord:
    name: str
    size: int
    section: str
    source_path: str


class RawSymbol(NamedTuple):
    name: str
    size: int
    section: str


def unclassified_path(name: str) -> str:
    return f"{UNCLASSIFIED}/{name}"


# ────────────────────── Format A: nm with line info ────────────

def load_symbol_paths(nm_text: str, path_to_strip: Optional[str] = None) -> Dict[str, str]:
    """
    Map each symbol name to its tree path `<source path>/<symbol>`.

    Symbols without a `file:line` column, or whose file lies outside
    `path_to_strip` when one is given, go under the unclassified key.
    """
    symbols_paths = {}
    for line in nm_text.splitlines():
        fields = line.split()
        if not fields:
            continue
        if len(fields) < 4:
            log.debug("nm: skipping malformed line %r", line)
            continue
        name = fields[3]
        if len(fields) < 5:
            symbols_paths[name] = unclassified_path(name)
            continue

        source = fields[4].rsplit(":", 1)[0]
        if path_to_strip is not None:
            if path_to_strip in source:
                path = source.replace(path_to_strip, "", 1).lstrip("/") + "/" + name
            else:
                path = unclassified_path(name)
        else:
            path = source.lstrip("/") + "/" + name
        symbols_paths[name] = path
    return symbols_paths


# ────────────────────── Format B: objdump -tw ──────────────────

def _split_symbol_line(line: str) -> List[str]:
    """
    Blank out the fixed-width flag column and tokenize the rest.

    The flag column is seven characters right after the address and may hold
    spaces, so a plain split() would give a variable number of tokens.
    """
    addr_end = line.find(" ")
    if addr_end <= 0:
        return []
    flags_end = addr_end + 1 + OBJDUMP_FLAG_WIDTH
    normalized = line[:addr_end] + " " + "." * OBJDUMP_FLAG_WIDTH + line[flags_end:]
    return normalized.split()


def parse_symbol_table(objdump_text: str) -> List[RawSymbol]:
    """Return `(name, size, section)` for every sized symbol in `objdump -tw` output."""
    symbols = []
    for line in objdump_text.splitlines():
        fields = _split_symbol_line(line)
        if len(fields) != 5:
            continue
        _, _, section, size_hex, name = fields
        try:
            size = int(size_hex, 16)
        except ValueError:
            continue
        if size == 0:
            continue
        symbols.append(RawSymbol(name, size, section))
    return symbols


# ────────────────────── Join ───────────────────────────────────

def join_symbols(raw_symbols: Iterable[RawSymbol],
                 symbols_paths: Dict[str, str]) -> List[SymbolRecord]:
    """Attach a tree path to every symbol; unknown names become unclassified."""
    records = []
    unresolved = 0
    for sym in raw_symbols:
        path = symbols_paths.get(sym.name)
        if path is None:
            unresolved += 1
            log.debug("no source path for %s (%s), marked unclassified", sym.name, sym.section)
            path = unclassified_path(sym.name)
        records.append(SymbolRecord(sym.name, sym.size, sym.section, path))
    if unresolved:
        log.info("%d symbol(s) missing from the nm path map", unresolved)
    return records


def filter_sections(records: Iterable[SymbolRecord], section_names) -> List[SymbolRecord]:
    names = set(section_names)
    return [r for r in records if r.section in names]
