"""
Convergence plots.

Each sub-directory of the logs directory becomes one SVG chart with one
exploitability curve (log scale) per CSV file, plotted against wall-clock
time.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from tabular_cfr.training.convergence_log import COLUMNS

logger = logging.getLogger(__name__)

MAX_POINTS = 800


def thin_rows(df: pd.DataFrame, max_rows: int = MAX_POINTS) -> pd.DataFrame:
    """Keep at most `max_rows` evenly spaced rows."""
    if len(df) <= max_rows:
        return df
    idx = np.floor(np.arange(max_rows) * (len(df) / max_rows)).astype(int)
    return df.iloc[idx]


def load_logs(log_dir: Union[str, Path]) -> List[tuple]:
    """Read every CSV convergence log of a directory, sorted by file name."""
    logs = []
    for path in sorted(Path(log_dir).glob('*.csv')):
        df = pd.read_csv(path)
        missing = [c for c in ('wall_clock_seconds', 'exploitability') if c not in df.columns]
        if missing:
            logger.warning("Skipping %s: missing columns %s (expected %s)", path, missing, COLUMNS)
            continue
        if df.empty:
            logger.warning("Skipping empty log %s", path)
            continue
        logs.append((path.stem, thin_rows(df)))
    return logs


def plot_log_dir(log_dir: Union[str, Path], output_dir: Union[str, Path]) -> Optional[Path]:
    """
    Plot all logs of one directory into `<output_dir>/<dir name>.svg`.

    Returns:
        Path of the written SVG, or None if the directory has no logs
    """
    log_dir = Path(log_dir)
    logs = load_logs(log_dir)
    if not logs:
        logger.warning("No log files in %s", log_dir)
        return None

    fig, ax = plt.subplots(figsize=(10, 8))
    for name, df in logs:
        logger.info("Plotting %s", name)
        # Exploitability 0 cannot be drawn on a log axis
        df = df[df['exploitability'] > 0]
        ax.plot(df['wall_clock_seconds'] / 60.0, df['exploitability'],
                label=name, linewidth=1.5, alpha=0.8)

    ax.set_yscale('log')
    ax.set_xlabel('Elapsed Time (mins)')
    ax.set_ylabel('Exploitability')
    ax.set_title(str(log_dir))
    ax.legend(loc='best')
    ax.grid(True, which='both', linestyle='--', linewidth=0.6, alpha=0.6)
    fig.tight_layout()

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    img_path = output_dir / f"{log_dir.name}.svg"
    fig.savefig(img_path, format='svg')
    plt.close(fig)

    logger.info("%s created", img_path)
    return img_path


def plot_all(logs_dir: Union[str, Path] = 'logs', output_dir: Union[str, Path] = 'graphs') -> List[Path]:
    """Plot every sub-directory of `logs_dir`."""
    written = []
    for log_dir in sorted(p for p in Path(logs_dir).iterdir() if p.is_dir()):
        img_path = plot_log_dir(log_dir, output_dir)
        if img_path is not None:
            written.append(img_path)
    return written
