"""
Exception types shared by every layer.

ConfigError covers bad user input detected before any traversal starts;
GameContractError flags a game implementation that breaks the contract
in tabular_cfr.games.base (a programming error, never recovered from).
"""


class ConfigError(ValueError):
    """Unknown game or solver, malformed duration or iteration count."""


class GameContractError(RuntimeError):
    """A game implementation violated the extensive-form game contract."""
