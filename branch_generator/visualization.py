"""
Visualization utilities for branches and subdivided cells.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Iterable, Optional, Sequence

from .geometry import Segment, project
from .generator import BranchGenerator

AXIS_LABELS = {
    "xy": ("X", "Y"),
    "xz": ("X", "Z"),
    "yz": ("Y", "Z"),
}


def plot_branches(
    segments: Sequence[Segment],
    plane: str = "yz",
    ax: Optional[plt.Axes] = None,
    title: str = "Branches",
    edge_width: float = 1.5,
    edge_color: str = '#2C3E50',
    show_nodes: bool = True
) -> plt.Axes:
    """
    Plot branch segments projected onto an axis plane.

    Args:
        segments: Branch segments
        plane: Projection plane ('xy', 'xz', 'yz')
        ax: Matplotlib axis (creates new if None)
        title: Plot title
        edge_width: Segment line width
        edge_color: Segment color
        show_nodes: Mark segment endpoints

    Returns:
        Matplotlib axis
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))

    for seg in segments:
        (x0, y0), (x1, y1) = project(seg.start, plane), project(seg.end, plane)
        ax.plot([x0, x1], [y0, y1], color=edge_color, linewidth=edge_width, zorder=1)

    if show_nodes and segments:
        points = np.array([project(p, plane) for seg in segments for p in seg])
        ax.scatter(
            points[:, 0], points[:, 1],
            s=15, c='#E74C3C', zorder=2,
            edgecolors='black', linewidths=0.5
        )

    xlabel, ylabel = AXIS_LABELS[plane]
    ax.set_aspect('equal')
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)

    return ax


def plot_policy_comparison(
    codes: Sequence[int],
    generator: Optional[BranchGenerator] = None,
    plane: str = "yz",
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Plot depth-first and breadth-first growth of the same codes side by side.

    Args:
        codes: Code sequence
        generator: Generator to use (default config if None)
        plane: Projection plane
        save_path: Optional path to save the figure

    Returns:
        Matplotlib figure
    """
    generator = generator or BranchGenerator()

    fig, axes = plt.subplots(1, 2, figsize=(12, 6))

    for ax, policy in zip(axes, ("depth_first", "breadth_first")):
        segments, metadata = generator.generate(codes, policy=policy)
        plot_branches(
            segments, plane=plane, ax=ax,
            title=f"{policy.replace('_', '-')} ({metadata['segments']} segments)"
        )

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_cells(
    cells: Iterable,
    ax: Optional[plt.Axes] = None,
    title: str = "Subdivision",
    cmap: str = 'viridis'
) -> plt.Axes:
    """
    Plot subdivided cells, colored by area.

    Args:
        cells: Shapely polygons
        ax: Matplotlib axis
        title: Plot title
        cmap: Colormap name

    Returns:
        Matplotlib axis
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))

    cells = list(cells)
    if cells:
        areas = np.array([c.area for c in cells])
        span = areas.max() - areas.min()
        norm = (areas - areas.min()) / span if span > 0 else np.zeros_like(areas)
        colors = plt.get_cmap(cmap)(norm)

        for cell, color in zip(cells, colors):
            xs, ys = cell.exterior.xy
            ax.fill(xs, ys, facecolor=color, edgecolor='black', linewidth=0.8, alpha=0.8)

    ax.set_aspect('equal')
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.grid(True, alpha=0.3)

    return ax
