"""
Tour rendering
Draws tours as labelled points joined by a closed polyline, and plots the
length histories recorded by the search strategies.
"""
import os
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt

from euclid_tsp import Node, coords_array, node_key, tour_length


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def render_tour(tour: Sequence[Node], path: str, title: Optional[str] = None, dpi: int = 150) -> str:
    """
    Save a PNG of the tour.

    Args:
        tour: ordered nodes; the last one is joined back to the first
        path: output file (parent directories are created)
        title: prefix for the plot title, the tour length is appended

    Returns:
        The path written.
    """
    length = tour_length(tour)
    fig, ax = plt.subplots(figsize=(7, 7))
    try:
        if len(tour) > 0:
            pts = coords_array(tour)
            closed = list(range(len(tour))) + [0]
            ax.plot(pts[closed, 0], pts[closed, 1], '-', color='steelblue', linewidth=1.2, zorder=1)
            ax.scatter(pts[:, 0], pts[:, 1], color='black', s=25, zorder=2)
            for node in tour:
                ax.annotate(str(node_key(node)), (node.x, node.y), textcoords='offset points',
                            xytext=(4, 4), fontsize=8)
        label = f"length={length:.4f}"
        ax.set_title(f"{title}: {label}" if title else label)
        ax.set_aspect('equal', adjustable='datalim')
        ax.grid(True, alpha=0.3)

        _ensure_parent(path)
        fig.savefig(path, dpi=dpi, bbox_inches='tight')
    finally:
        plt.close(fig)
    return path


def plot_histories(histories: Dict[str, Sequence[float]], path: str, dpi: int = 150) -> str:
    """Plot one line per strategy history (x = sample index, y = tour length)."""
    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        for name, values in histories.items():
            if len(values) == 0:
                continue
            style = 'o-' if len(values) < 50 else '-'
            ax.plot(range(len(values)), list(values), style, label=name, alpha=0.8)
        ax.set_xlabel('Sample')
        ax.set_ylabel('Tour length')
        ax.set_title('Tour length history')
        if ax.get_legend_handles_labels()[0]:
            ax.legend()
        ax.grid(True, alpha=0.3)

        _ensure_parent(path)
        fig.savefig(path, dpi=dpi, bbox_inches='tight')
    finally:
        plt.close(fig)
    return path
