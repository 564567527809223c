"""
Measurement and state visualization.

Features:
- ASCII histograms of counts and probabilities (no dependencies)
- Bar chart of counts (requires matplotlib, imported on first use)
"""
from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np

_BAR_WIDTH = 40


def show_counts(counts: Dict[str, int], total: Optional[int] = None) -> str:
    """Display measurement counts as histogram."""
    if total is None:
        total = sum(counts.values())

    lines = []
    lines.append("Measurement Results:")
    lines.append("─" * 50)

    for bitstring in sorted(counts.keys()):
        count = counts[bitstring]
        prob = count / total if total else 0.0
        bar = '█' * int(prob * _BAR_WIDTH)
        lines.append(f"|{bitstring}⟩: {bar:{_BAR_WIDTH}s} {count:4d} ({prob*100:5.1f}%)")

    return '\n'.join(lines)


def show_probabilities(probabilities: Sequence[float], num_qubits: int,
                       threshold: float = 0.01) -> str:
    """Display basis-state probabilities, skipping those below ``threshold``."""
    lines = []
    lines.append("Probabilities:")
    lines.append("─" * 50)

    for i, prob in enumerate(np.asarray(probabilities, dtype=float)):
        if prob < threshold:
            continue
        bitstring = format(i, f'0{num_qubits}b') if num_qubits else ''
        bar = '█' * int(prob * _BAR_WIDTH)
        lines.append(f"|{bitstring}⟩: {bar:{_BAR_WIDTH}s} {prob*100:5.1f}%")

    return '\n'.join(lines)


def plot_counts(counts: Dict[str, int], path: Optional[str] = None,
                title: str = "Measurement counts"):
    """
    Bar chart of measurement counts.

    Returns the matplotlib Figure; also writes it to ``path`` if given.
    The figure is drawn on its own Agg canvas, so pyplot and the global
    backend are left untouched.
    """
    try:
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.figure import Figure
    except ImportError:
        raise ImportError("matplotlib required: pip install matplotlib") from None

    labels = sorted(counts)
    values = [counts[k] for k in labels]

    fig = Figure(figsize=(max(4, 0.6 * len(labels) + 2), 4))
    FigureCanvasAgg(fig)
    ax = fig.subplots()
    ax.bar(labels, values, color='#2196F3')
    ax.set_xlabel('Outcome')
    ax.set_ylabel('Count')
    ax.set_title(title)
    ax.grid(axis='y', alpha=0.3)
    fig.tight_layout()

    if path is not None:
        fig.savefig(path, dpi=120)
    return fig
