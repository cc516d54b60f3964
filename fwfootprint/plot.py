# ─── plot.py ──────────────────────────────────────────────────────────────
"""Pie-chart summary of a pruned footprint tree."""

from __future__ import annotations
import logging

import matplotlib
matplotlib.use("Agg")              # files only, no display needed
import matplotlib.pyplot as plt
import numpy as np

log = logging.getLogger(__name__)

# Dark palette, cycled when there are more slices than colors
SLICE_COLORS = [
    '#FF6B6B', '#4ECDC4', '#45B7D1', '#FFA07A', '#98D8C8', '#FFD93D',
    '#95E77E', '#DDA0DD', '#F4A460', '#87CEEB', '#D8BFD8', '#F0E68C',
]


def slice_data(data: dict, total: int):
    """
    Labels and sizes for the pie, largest first.

    Bytes not covered by `data` (hidden by pruning, or padding in the .bin)
    become a "(hidden)" slice so the pie always adds up to `total`.
    """
    items = sorted(data.items(), key=lambda kv: kv[1], reverse=True)
    labels = [k for k, _ in items]
    sizes = np.array([v for _, v in items], dtype=np.int64)
    rest = int(total) - int(sizes.sum())
    if rest > 0:
        labels.append("(hidden)")
        sizes = np.append(sizes, rest)
    return labels, sizes


def plot_summary(data: dict, total: int, out_file, title: str = "Footprint"):
    labels, sizes = slice_data(data, total)
    if sizes.size == 0 or sizes.sum() == 0:
        log.warning("nothing to plot for %s", title)
        return None

    colors = [SLICE_COLORS[i % len(SLICE_COLORS)] for i in range(len(labels))]
    with plt.style.context('dark_background'):
        fig, ax = plt.subplots(figsize=(10, 7))
        wedges, _texts, _autotexts = ax.pie(
            sizes, colors=colors, startangle=90, counterclock=False,
            autopct=lambda p: f"{p:.1f}%" if p >= 2 else "",
            wedgeprops=dict(edgecolor='#0a0a0a', linewidth=1),
        )
        ax.legend(wedges, [f"{l} ({int(s):,} B)" for l, s in zip(labels, sizes)],
                  loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize=8, frameon=False)
        ax.set_title(f"{title}: {int(total):,} bytes")
        ax.axis('equal')
        fig.savefig(out_file, dpi=150, bbox_inches='tight', facecolor='#0a0a0a')
        plt.close(fig)
    log.info("wrote %s", out_file)
    return out_file
