"""Pool engine error classes.

Every error aborts the whole operation; the pool and token ledgers are left
exactly as they were before the call. Messages match the revert reasons
external callers match on ("Zero amounts", "Invalid amount", ...).
"""


class DexError(Exception):
    """Base error for pool and token ledger operations."""

    default_message = "Pool operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


# --- Invalid input ---


class InvalidInputError(DexError):
    """A caller-supplied amount is out of range."""

    default_message = "Invalid input"


class ZeroAmountsError(InvalidInputError):
    """A liquidity deposit with a zero amount on either side."""

    default_message = "Zero amounts"


class ZeroAmountError(InvalidInputError):
    """A swap with a zero input amount."""

    default_message = "Zero amount"


class InvalidAmountError(InvalidInputError):
    """A withdrawal of zero shares or more shares than owned, or a negative amount."""

    default_message = "Invalid amount"


# --- Undefined computation ---


class UndefinedComputationError(DexError):
    """The requested quantity is undefined for the current pool state."""

    default_message = "Undefined computation"


class ZeroReservesError(UndefinedComputationError):
    """Price or swap requested while a reserve is empty."""

    default_message = "Zero reserves"


class InvariantViolationError(UndefinedComputationError):
    """A swap would not strictly increase the constant product k."""

    default_message = "Invariant violated"


# --- Insufficient value ---


class InsufficientValueError(DexError):
    """Not enough value available to complete a transfer."""

    default_message = "Insufficient value"


class InsufficientBalanceError(InsufficientValueError):
    """Token holder balance is lower than the transfer amount."""

    default_message = "Insufficient balance"


class InsufficientAllowanceError(InsufficientValueError):
    """Spender allowance is lower than the transfer amount."""

    default_message = "Insufficient allowance"


class InsufficientLiquidityError(InsufficientValueError):
    """Requested output is not available in the pool reserves."""

    default_message = "Insufficient liquidity"
