"""
Training layer (Layer 4 - highest).

This layer drives solvers over time, writes convergence logs and plots them.
It may import from: tabular_cfr.errors, tabular_cfr.games, tabular_cfr.engine,
tabular_cfr.solvers
"""

from tabular_cfr.training.config import TrainingConfig, parse_duration
from tabular_cfr.training.convergence_log import (
    COLUMNS,
    ConvergenceRecord,
    ConvergenceLogWriter,
    read_convergence_log,
)
from tabular_cfr.training.driver import TrainingResult, format_strategy, run_training, train
from tabular_cfr.training.logging_setup import setup_logging

__all__ = [
    'TrainingConfig',
    'parse_duration',
    'COLUMNS',
    'ConvergenceRecord',
    'ConvergenceLogWriter',
    'read_convergence_log',
    'TrainingResult',
    'format_strategy',
    'run_training',
    'train',
    'setup_logging',
]
