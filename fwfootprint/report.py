# ─── report.py ────────────────────────────────────────────────────────────
"""Text rendering of trees, totals and feature breakdowns."""

from __future__ import annotations
import os
import platform
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .features import FeatureSpec
from .sections import Footprint
from .symbols import UNCLASSIFIED
from .tree import ROOT

RULE_WIDTH = 110
UNCLASSIFIED_LABEL = "(unclassified)"


# ────────────────────── Formatting ─────────────────────────────

@dataclass(frozen=True)
class FormatConfig:
    """Escape sequences wrapped around report elements."""
    header: str = ""
    ok: str = ""
    warning: str = ""
    end: str = ""

    @classmethod
    def ansi(cls) -> "FormatConfig":
        return cls(header="\033[95m", ok="\033[94m", warning="\033[93m", end="\033[0m")

    @classmethod
    def plain(cls) -> "FormatConfig":
        return cls()

    @classmethod
    def for_stream(cls, stream=None, color: bool = True) -> "FormatConfig":
        """ANSI colors only on a real terminal and never on Windows consoles."""
        stream = stream or sys.stdout
        if not color or platform.system() == "Windows":
            return cls.plain()
        if not (hasattr(stream, "isatty") and stream.isatty()):
            return cls.plain()
        return cls.ansi()


# ── Helpers (same look as the post-build summary) ─────────────────────────
def pretty(n):
    return f"{n:,}".rjust(9)


def pct(used, total):
    if not total:
        return "  n/a  "
    return f"{used * 100 / total:5.1f} %"


# ────────────────────── Trees ──────────────────────────────────

def render_tree(data: dict, total: int, depth: Optional[int] = None,
                base: Optional[str] = None,
                fmt: FormatConfig = FormatConfig()) -> Tuple[List[str], float]:
    """
    Render `{path: size}` as an indented listing.

    The root key is left out; it would only repeat the total. Returns the
    lines and the summed percentage of the top-level entries.
    Paths that do not exist under `base` are highlighted as warnings; this
    only changes colors, never sizes.
    """
    lines = []
    top_percent = 0.0
    lines.append("{:92s} {:10s} {:8s}".format(fmt.header + "Path", "Size", "%" + fmt.end))
    lines.append("=" * RULE_WIDTH)
    for key in sorted(data):
        if key == ROOT:
            continue
        parts = key.split("/")
        if depth and len(parts) > depth:
            continue

        percent = 100 * float(data[key]) / float(total) if total else 0.0
        if len(parts) < 2:
            top_percent += percent

        color = fmt.ok
        if len(parts) > 1 and base is not None and not os.path.exists(os.path.join(base, key)):
            color = fmt.warning
        name = UNCLASSIFIED_LABEL if key == UNCLASSIFIED else parts[-1]
        label = color + "-- " + name + fmt.end
        lines.append("{:80s} {:20d} {:8.2f}%".format("  " * (len(parts) - 1) + label,
                                                      data[key], percent))

    lines.append("=" * RULE_WIDTH)
    lines.append("{:92d}".format(total))
    return lines, top_percent


# ────────────────────── Summary ────────────────────────────────

def render_summary(footprint: Footprint, loaded_sections_total: int = 0,
                   ram_sections_total: int = 0,
                   flash_capacity: int = 0, ram_capacity: int = 0) -> List[str]:
    """Memory usage block: totals against device capacities."""
    lines = ["", "──────────  MEMORY USAGE SUMMARY  ──────────"]
    if flash_capacity:
        lines.append(f"Flash : {pretty(footprint.total_flash)} / {pretty(flash_capacity)}  "
                     f"({pct(footprint.total_flash, flash_capacity)})")
    else:
        lines.append(f"Flash : {pretty(footprint.total_flash)}")
    if ram_capacity:
        lines.append(f"RAM   : {pretty(footprint.total_ram)} / {pretty(ram_capacity)}  "
                     f"({pct(footprint.total_ram, ram_capacity)})")
    else:
        lines.append(f"RAM   : {pretty(footprint.total_ram)}")
    # the .bin and the LOAD sections rarely agree to the byte
    if loaded_sections_total:
        lines.append(f"LOAD sections  : {pretty(loaded_sections_total)}")
    if ram_sections_total:
        lines.append(f"ALLOC sections : {pretty(ram_sections_total)}")
    lines.append("────────────────────────────────────────────")
    lines.append("")
    return lines


# ────────────────────── Features ───────────────────────────────

def render_features(features: Sequence[FeatureSpec], total: int) -> List[str]:
    lines = ["{:60s} {:>12s} {:>9s}".format("Feature", "Size", "%"), "-" * 83]
    for root in features:
        for depth, feature in root.walk():
            percent = 100 * feature.size / total if total else 0.0
            lines.append("{:60s} {:12d} {:8.2f}%".format("  " * depth + feature.name,
                                                          feature.size, percent))
    return lines


def render_uncategorized(items: Iterable[Tuple[str, int]]) -> List[str]:
    return ["UNCATEGORIZED: %s %d" % (path, size) for path, size in items]


def emit(lines: Iterable[str], stream=None):
    stream = stream or sys.stdout
    for line in lines:
        print(line, file=stream)
