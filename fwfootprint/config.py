# ─── config.py ────────────────────────────────────────────────────────────
"""Report configuration and feature-definition loading."""

from __future__ import annotations
import json
import os
import pathlib
from dataclasses import dataclass
from typing import List, Optional

from .errors import FeatureConfigError
from .features import FeatureSpec


# ────────────────────── Report configuration ───────────────────

@dataclass
class ReportConfig:
    """
    Everything one footprint run needs.

    Attributes:
        outdir: Build output directory holding <kernel_name>.elf/.bin/.stat
        kernel_name: Base name of the build artifacts
        source_dir: Prefix stripped from source paths (defaults to $ZEPHYR_BASE/)
        depth: Deepest tree level to print, None for everything
        rom / ram: Which trees to report
        features_file: Optional JSON feature definition
        plot_file: Optional image path for the pie-chart summary
        flash_capacity / ram_capacity: Device budgets in bytes, 0 if unknown
        toolchain_prefix: Prepended to nm / objdump, e.g. "arm-none-eabi-"
        color: Use ANSI colors in the report
    """
    outdir: str = "."
    kernel_name: str = "zephyr"
    source_dir: Optional[str] = None
    depth: Optional[int] = None
    rom: bool = False
    ram: bool = False
    features_file: Optional[str] = None
    plot_file: Optional[str] = None
    flash_capacity: int = 0
    ram_capacity: int = 0
    toolchain_prefix: str = ""
    color: bool = True

    def __post_init__(self):
        """Fill environment defaults and coerce numbers."""
        self.flash_capacity = int(self.flash_capacity or 0)
        self.ram_capacity = int(self.ram_capacity or 0)
        if self.depth is not None:
            self.depth = int(self.depth)
        if self.source_dir is None and base_dir():
            self.source_dir = os.path.join(base_dir(), "")
        if not self.toolchain_prefix:
            self.toolchain_prefix = os.environ.get("CROSS_COMPILE", "")

    def _artifact(self, ext: str) -> pathlib.Path:
        return pathlib.Path(self.outdir) / f"{self.kernel_name}.{ext}"

    @property
    def elf_file(self) -> pathlib.Path:
        return self._artifact("elf")

    @property
    def bin_file(self) -> pathlib.Path:
        return self._artifact("bin")

    @property
    def stat_file(self) -> pathlib.Path:
        return self._artifact("stat")


def base_dir() -> Optional[str]:
    """Source tree root used for on-disk highlighting, or None."""
    return os.environ.get("ZEPHYR_BASE") or None


# ────────────────────── Feature definitions ────────────────────

def _feature_from_dict(data, where: str) -> FeatureSpec:
    if not isinstance(data, dict):
        raise FeatureConfigError(f"{where}: feature must be an object, got {type(data).__name__}")
    folders = data.get("folders")
    if not isinstance(folders, list) or not all(isinstance(f, str) for f in folders):
        raise FeatureConfigError(f"{where}: 'folders' must be a list of strings")
    excludes = data.get("excludes", [])
    if not isinstance(excludes, list) or not all(isinstance(e, str) for e in excludes):
        raise FeatureConfigError(f"{where}: 'excludes' must be a list of strings")
    children = data.get("children", [])
    if not isinstance(children, list):
        raise FeatureConfigError(f"{where}: 'children' must be a list")
    return FeatureSpec(
        name=str(data.get("name", "")),
        folders=folders,
        excludes=excludes,
        children=[_feature_from_dict(c, f"{where}.children[{i}]")
                  for i, c in enumerate(children)],
    )


def parse_features(data) -> List[FeatureSpec]:
    """Build a feature forest from decoded JSON (a list or a single object)."""
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise FeatureConfigError("feature definition must be a list of features")
    return [_feature_from_dict(d, f"features[{i}]") for i, d in enumerate(data)]


def load_features(path) -> List[FeatureSpec]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise FeatureConfigError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise FeatureConfigError(f"{path}: invalid JSON ({e})") from e
    return parse_features(data)
