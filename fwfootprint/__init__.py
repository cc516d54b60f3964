"""Firmware flash / RAM footprint attribution by source path and feature."""

__version__ = "0.3.0"

from .features import FeatureSpec, categorize, classify
from .sections import SectionInfo, get_footprint, parse_section_headers
from .symbols import SymbolRecord, join_symbols, load_symbol_paths, parse_symbol_table
from .tree import build_tree, insert, prune, summarize
