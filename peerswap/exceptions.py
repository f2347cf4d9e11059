"""
PeerSwap Exceptions

Custom exception classes for the settlement engine.
"""


class PeerSwapException(Exception):
    """Base exception for PeerSwap."""
    pass


class InvalidKeyError(PeerSwapException):
    """Invalid cryptographic key."""
    pass


class InvalidAddressError(PeerSwapException):
    """Invalid address format."""
    pass


class ConfigurationError(PeerSwapException):
    """Configuration error."""
    pass


class SwapError(PeerSwapException):
    """Base class for every failure that aborts a swap or cancel."""
    pass


class OrderExpired(SwapError):
    """Order deadline has passed."""
    pass


class InvalidSignature(SwapError):
    """Signature does not authorize the order for its seller."""
    pass


class OrderNotOpen(SwapError):
    """Order was already executed, canceled, or is not in the expected state."""
    pass


class InvalidArrays(SwapError):
    """Fee recipient and fee amount lists differ in length."""
    pass


class InvalidPayment(SwapError):
    """Attached native value is inconsistent with the order terms."""
    pass


class ArithmeticUnderflow(SwapError):
    """Fees exceed the amount they are deducted from."""
    pass


class InvalidOrder(SwapError):
    """Order terms are not valid for its order type."""
    pass


class TransferFailed(SwapError):
    """An asset transfer was refused by the ledger."""
    pass


class ReentrancyError(SwapError):
    """A state-mutating entry point was re-entered during an active call."""
    pass


class NotOrderMaker(SwapError):
    """Caller tried to cancel an order signed by someone else."""
    pass
