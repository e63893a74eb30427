"""Pocket Trader signals and paper-trading backend"""

__version__ = "1.0.0"
