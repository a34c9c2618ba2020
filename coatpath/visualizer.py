import os
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from .models import CoatingSettings
from .preview import PathPoint


def split_moves(path: Sequence[PathPoint], coating_height: float, tolerance: float = 1e-6):
    """
    Split a preview path into moves made at coating height and moves made above it.

    Args:
        path: (x, y, z) points in mm
        coating_height: Z height of coating moves
        tolerance: Z comparison tolerance

    Returns:
        Tuple of (coating_segments, travel_segments), each an array of shape (n, 2, 2)
    """
    points = np.asarray(path, dtype=float).reshape(-1, 3)
    if len(points) < 2:
        empty = np.empty((0, 2, 2))
        return empty, empty

    segments = np.stack([points[:-1, :2], points[1:, :2]], axis=1)
    at_coating_height = (points[:-1, 2] <= coating_height + tolerance) & \
                        (points[1:, 2] <= coating_height + tolerance)
    moved = np.any(segments[:, 0, :] != segments[:, 1, :], axis=1)

    return segments[at_coating_height & moved], segments[~at_coating_height & moved]


def plot_toolpath_preview(path: Sequence[PathPoint], settings: CoatingSettings,
                          output_file: Optional[str] = None, dpi: int = 150,
                          font_size: int = 8, show: bool = True):
    """
    Plot the parsed G-code path in the XY plane.

    Moves at coating height are drawn solid; moves above it are dashed.
    The Y axis is inverted to match the canvas.

    Args:
        path: Preview path from parse_gcode_to_path (mm)
        settings: Coating settings used for the run
        output_file: Optional path to save the plot
        dpi: Plot resolution
        font_size: Font size for annotations
        show: Display the plot window

    Returns:
        The matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)

    coating, travel = split_moves(path, settings.coating_height)
    if len(travel):
        ax.add_collection(LineCollection(travel, colors='gray', linestyles='dashed',
                                         linewidths=0.8, label="Travel"))
    if len(coating):
        ax.add_collection(LineCollection(coating, colors='blue', linewidths=1.5,
                                         label="Coating height"))

    points = np.asarray(path, dtype=float).reshape(-1, 3)
    if len(points):
        ax.plot(points[0, 0], points[0, 1], 'g^', markersize=8, label="Start")
        ax.plot(points[-1, 0], points[-1, 1], 'rs', markersize=6, label="End")

    ax.set_xlabel("X-axis (mm)", fontsize=font_size + 2)
    ax.set_ylabel("Y-axis (mm)", fontsize=font_size + 2)
    ax.set_title(f"Coating Toolpath Preview\nCoating Z: {settings.coating_height:g} mm, "
                 f"Safe Z: {settings.safe_height:g} mm", fontsize=font_size + 4)
    ax.autoscale()
    ax.invert_yaxis()
    ax.legend(fontsize=font_size)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)

    coating_length = float(np.sum(np.linalg.norm(coating[:, 1] - coating[:, 0], axis=1))) if len(coating) else 0.0
    stats_text = (f"Moves: {len(points)}\n"
                  f"Coating segments: {len(coating)}\n"
                  f"Coated length: {coating_length:.1f} mm")
    ax.text(0.02, 0.02, stats_text, transform=ax.transAxes,
            fontsize=font_size, verticalalignment='bottom', horizontalalignment='left',
            bbox=dict(boxstyle="round,pad=0.5", facecolor="lightblue", alpha=0.8))

    fig.tight_layout()

    if output_file:
        fig.savefig(output_file, dpi=dpi, bbox_inches='tight')

    if show:
        plt.show()

    return fig


def save_plot_preview(path: Sequence[PathPoint], settings: CoatingSettings,
                      base_filename: str, output_dir: str = "output") -> str:
    """
    Save a plot preview to the output directory without showing it.

    Args:
        path: Preview path (mm)
        settings: Coating settings used for the run
        base_filename: Base name for the output file (without extension)
        output_dir: Directory to write into

    Returns:
        Path of the saved PNG
    """
    os.makedirs(output_dir, exist_ok=True)
    plot_filename = os.path.join(output_dir, f"{base_filename}_preview.png")

    fig = plot_toolpath_preview(path, settings, plot_filename, dpi=150, font_size=10, show=False)
    plt.close(fig)

    return plot_filename
