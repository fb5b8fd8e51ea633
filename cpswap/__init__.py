"""Constant-product swap pools - Python Implementation."""

from cpswap.engine import PoolEngine, get_default_engine

__version__ = "0.1.0"
__all__ = ["PoolEngine", "get_default_engine", "__version__"]
