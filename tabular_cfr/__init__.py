"""
Tabular CFR Solver

Counterfactual Regret Minimization (vanilla and external-sampling Monte
Carlo) for two-player zero-sum extensive-form games, with a best-response
evaluator to measure exploitability.
"""

__version__ = "0.1.0"
