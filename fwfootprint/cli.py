# ─── cli.py ───────────────────────────────────────────────────────────────
"""
fwfootprint: flash / RAM footprint report for a firmware build.

Usage:
  fwfootprint -o build/zephyr -k zephyr --rom --ram [-d 3] [--features f.json]
"""

from __future__ import annotations
import argparse
import logging
import sys

from . import __version__
from .analysis import analyze_elf
from .config import ReportConfig, base_dir, load_features
from .errors import FootprintError, MissingArtifactError
from .features import categorize
from .report import (FormatConfig, emit, render_features, render_summary,
                     render_tree, render_uncategorized)
from .sections import get_footprint
from .toolchain import Toolchain
from .tree import summarize

log = logging.getLogger("fwfootprint")


def setup_logging(verbose: int = 0):
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(console)
    log.setLevel(max(logging.WARNING - 10 * verbose, logging.DEBUG))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Firmware flash / RAM footprint report")
    parser.add_argument("-o", "--outdir", default=".", help="build output directory")
    parser.add_argument("-k", "--kernel-name", default="zephyr",
                        help="base name of the .elf/.bin/.stat artifacts")
    parser.add_argument("-z", "--source-dir", default=None,
                        help="source prefix stripped from paths (default: $ZEPHYR_BASE/)")
    parser.add_argument("-d", "--depth", type=int, default=None, help="deepest level to print")
    parser.add_argument("-F", "--rom", action="store_true", help="print the flash tree")
    parser.add_argument("-r", "--ram", action="store_true", help="print the RAM tree")
    parser.add_argument("-s", "--summary", action="store_true",
                        help="print pruned trees instead of the full ones")
    parser.add_argument("-f", "--features", dest="features_file", default=None,
                        help="JSON feature definition")
    parser.add_argument("-p", "--plot", dest="plot_file", default=None,
                        help="write a pie chart of the pruned flash tree")
    parser.add_argument("--flash-size", type=lambda s: int(s, 0), default=0,
                        help="flash capacity in bytes, for percentages")
    parser.add_argument("--ram-size", type=lambda s: int(s, 0), default=0,
                        help="RAM capacity in bytes, for percentages")
    parser.add_argument("--toolchain-prefix", default="", help="e.g. arm-none-eabi-")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true", help="only report errors")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def config_from_args(args) -> ReportConfig:
    return ReportConfig(
        outdir=args.outdir,
        kernel_name=args.kernel_name,
        source_dir=args.source_dir,
        depth=args.depth,
        rom=args.rom,
        ram=args.ram,
        features_file=args.features_file,
        plot_file=args.plot_file,
        flash_capacity=args.flash_size,
        ram_capacity=args.ram_size,
        toolchain_prefix=args.toolchain_prefix,
        color=not args.no_color,
    )


def run(cfg: ReportConfig, toolchain=None, stream=None, summary: bool = False) -> int:
    """One report. Returns a process exit code."""
    for artifact in (cfg.elf_file, cfg.bin_file, cfg.stat_file):
        if not artifact.exists():
            raise MissingArtifactError(artifact)

    toolchain = toolchain or Toolchain(cfg.toolchain_prefix)
    fp = get_footprint(cfg.bin_file, cfg.stat_file, cfg.flash_capacity, cfg.ram_capacity)
    trees = analyze_elf(toolchain, cfg.elf_file, cfg.source_dir)
    fmt = FormatConfig.for_stream(stream, cfg.color)
    base = base_dir()

    emit(render_summary(fp, trees.loaded_sections_total, trees.ram_sections_total,
                        cfg.flash_capacity, cfg.ram_capacity), stream)

    if cfg.rom:
        data = summarize(trees.rom, fp.total_flash) if summary else trees.rom
        lines, _ = render_tree(data, fp.total_flash, cfg.depth, base, fmt)
        emit(lines, stream)
    if cfg.ram:
        data = summarize(trees.ram, fp.total_ram) if summary else trees.ram
        lines, _ = render_tree(data, fp.total_ram, cfg.depth, base, fmt)
        emit(lines, stream)

    if cfg.features_file:
        features = load_features(cfg.features_file)
        uncategorized = categorize(trees.rom, features)
        emit(render_features(features, fp.total_flash), stream)
        emit(render_uncategorized(uncategorized), stream)

    if cfg.plot_file:
        # matplotlib is only paid for when a chart is asked for
        from .plot import plot_summary
        plot_summary(summarize(trees.rom, fp.total_flash), fp.total_flash,
                     cfg.plot_file, title=f"{cfg.kernel_name} flash")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(-1 if args.quiet else args.verbose)
    cfg = config_from_args(args)
    if not (cfg.rom or cfg.ram or cfg.features_file or cfg.plot_file):
        cfg.rom = cfg.ram = True
    try:
        return run(cfg, summary=args.summary)
    except MissingArtifactError as e:
        print(f"⚠️  {e}, footprint report skipped", file=sys.stderr)
        return 1
    except FootprintError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
