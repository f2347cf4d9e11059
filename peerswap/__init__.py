"""
PeerSwap Settlement Package

Core imports are lazily loaded so that importing a submodule does not pull
in the database driver.  For direct module access, import from submodules:

    from peerswap.settlement import SwapEngine, Order, OrderType
    from peerswap.tokens import TokenLedger, WrappedNative
    from peerswap.config import load_config
"""

__version__ = "1.0.0"


def __getattr__(name):
    """Lazy module loading."""
    if name == 'SwapEngine':
        from .settlement.engine import SwapEngine
        return SwapEngine
    elif name == 'DatabaseSQLite':
        from .database_sqlite import DatabaseSQLite
        return DatabaseSQLite
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module 'peerswap' has no attribute {name!r}")

__all__ = ['SwapEngine', 'DatabaseSQLite', 'load_config']
