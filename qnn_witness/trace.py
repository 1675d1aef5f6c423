"""
Offline analysis of witness sweep CSV traces.

Reads the header block and every data row (including rows appended by later
runs against the same file), summarizes each state's witness against its
target, and plots witness vs sweep index.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Union

import numpy as np

from .config import CSV_CONFIG_FIELDS, CSV_TARGETS_LABEL, CSV_TITLE

_HEADER_ROWS = 5

# Line colours, cycled per state
_COLORS = ['#0000B3', '#B30000', '#009900', '#B37700', '#6600B3', '#008080']


@dataclass
class SweepTrace:
    """Contents of one sweep CSV file."""
    time_chunks: int
    final_time: float
    count: int
    epochs: int
    labels: List[str]
    targets: np.ndarray
    index: np.ndarray
    values: np.ndarray

    @property
    def num_rows(self) -> int:
        return len(self.index)


def read_trace(filepath: Union[str, Path]) -> SweepTrace:
    """
    Parse a sweep CSV file.

    Raises:
        ValueError: header block is missing or a row has the wrong width
    """
    filepath = Path(filepath)

    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        rows = [row for row in csv.reader(f) if row]

    if len(rows) < _HEADER_ROWS:
        raise ValueError(f"{filepath}: incomplete header block")
    if rows[0] != [CSV_TITLE] or rows[1] != list(CSV_CONFIG_FIELDS):
        raise ValueError(f"{filepath}: not a chunked QNN trace")
    if rows[4][0] != CSV_TARGETS_LABEL:
        raise ValueError(f"{filepath}: missing targets row")

    try:
        time_chunks, final_time, count, epochs = rows[2]
        time_chunks, count, epochs = int(time_chunks), int(count), int(epochs)
        final_time = float(final_time)
        labels = rows[3][1:]
        targets = np.array([float(t) for t in rows[4][1:]])
    except ValueError as e:
        raise ValueError(f"{filepath}: malformed header block ({e})") from e

    width = len(labels) + 1
    if len(rows[4]) != width:
        raise ValueError(f"{filepath}: {len(labels)} labels but {len(rows[4]) - 1} targets")

    index = []
    values = []
    for line_no, row in enumerate(rows[_HEADER_ROWS:], start=_HEADER_ROWS + 1):
        if len(row) != width:
            raise ValueError(
                f"{filepath}:{line_no}: expected {width} fields, found {len(row)}"
            )
        index.append(int(row[0]))
        values.append([float(v) for v in row[1:]])

    return SweepTrace(
        time_chunks=time_chunks,
        final_time=final_time,
        count=count,
        epochs=epochs,
        labels=labels,
        targets=targets,
        index=np.array(index, dtype=int),
        values=np.array(values, dtype=float).reshape(len(index), len(labels)),
    )


def summarize_trace(trace: SweepTrace) -> Dict[str, Dict[str, float]]:
    """
    Per-state statistics over all rows.

    Returns:
        {label: {"target", "mean", "std", "error"}} with error = |mean - target|
    """
    summary = {}
    for j, label in enumerate(trace.labels):
        column = trace.values[:, j]
        if column.size:
            mean = float(np.mean(column))
            std = float(np.std(column))
        else:
            mean = std = float('nan')
        target = float(trace.targets[j])
        summary[label] = {
            "target": target,
            "mean": mean,
            "std": std,
            "error": abs(mean - target),
        }
    return summary


def print_trace_summary(trace: SweepTrace) -> None:
    """Print a summary table of a trace."""
    summary = summarize_trace(trace)

    print(f"\n{'='*64}")
    print(f"TRACE SUMMARY ({trace.num_rows} rows, {trace.time_chunks} chunks, "
          f"T_f = {trace.final_time:.6f})")
    print(f"{'='*64}")
    print(f"{'State':<14} {'Target':>10} {'Mean':>10} {'Std':>10} {'Error':>10}")
    print(f"{'-'*64}")
    for label, stats in summary.items():
        print(f"{label:<14} {stats['target']:>10.4f} {stats['mean']:>10.4f} "
              f"{stats['std']:>10.4f} {stats['error']:>10.4f}")


def plot_trace(trace: SweepTrace, output_path: Union[str, Path]) -> Path:
    """Plot witness vs sweep index per state, with dashed target lines."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    output_path = Path(output_path)

    fig, ax = plt.subplots(figsize=(8, 5))
    for j, label in enumerate(trace.labels):
        color = _COLORS[j % len(_COLORS)]
        ax.plot(trace.index, trace.values[:, j], 'o-', color=color,
                markersize=3, linewidth=1.0, label=label)
        ax.axhline(trace.targets[j], color=color, linestyle='--', linewidth=0.8, alpha=0.7)

    ax.set_xlabel('Sweep index (epoch or count)', fontsize=12)
    ax.set_ylabel('Entanglement witness', fontsize=12)
    ax.set_title(f'Chunked QNN test ({trace.time_chunks} chunks, count {trace.count})',
                 fontsize=11)
    ax.grid(True, alpha=0.25)
    ax.legend(fontsize=9, loc='best')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return output_path
