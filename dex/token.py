"""In-memory fungible token ledger.

The pool engine moves value only through the TokenLedger protocol. Token is
the reference ledger with ERC20 semantics (mint / transfer / approve /
transfer_from), used by the HTTP service, the simulation script and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import structlog

from dex.constants import MAX_ALLOWANCE
from dex.errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAmountError,
)
from dex.models.types import normalize_address
from dex.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of a ledger's balances and allowances."""

    balances: dict[str, int]
    allowances: dict[tuple[str, str], int]
    total_supply: int


@runtime_checkable
class TokenLedger(Protocol):
    """Token ledger interface consumed by the pool engine.

    The pool pulls deposits with transfer_from (the pool is the spender) and
    pays out with transfer. snapshot/restore let the pool revert a failed
    operation together with the transfers it already made.
    """

    @property
    def address(self) -> str: ...

    @property
    def symbol(self) -> str: ...

    def balance_of(self, owner: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> None: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None: ...

    def snapshot(self) -> LedgerSnapshot: ...

    def restore(self, snapshot: LedgerSnapshot) -> None: ...


@dataclass
class Token:
    """ERC20-style token ledger.

    Attributes:
        address: Token address (normalized to lowercase)
        symbol: Ticker symbol, e.g. "TKA"
        name: Human-readable name
        decimals: Display decimals (amounts are always base units)
    """

    address: str
    symbol: str
    name: str = ""
    decimals: int = 18
    _balances: dict[str, int] = field(default_factory=dict, repr=False)
    _allowances: dict[tuple[str, str], int] = field(default_factory=dict, repr=False)
    _total_supply: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address, validate=True)
        if not self.name:
            self.name = self.symbol

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, owner: str) -> int:
        return self._balances.get(normalize_address(owner), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def mint(self, to: str, amount: int) -> None:
        """Create new tokens in the recipient's balance."""
        _check_amount(amount)
        to = normalize_address(to)
        self._balances[to] = (S(self.balance_of(to)) + amount).to_uint256()
        self._total_supply = (S(self._total_supply) + amount).to_uint256()
        logger.debug("token_minted", token=self.symbol, to=to, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set the amount spender may move out of owner's balance."""
        _check_amount(amount)
        key = (normalize_address(owner), normalize_address(spender))
        self._allowances[key] = S(amount).to_uint256()

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move tokens from sender to recipient.

        Raises:
            InsufficientBalanceError: If sender holds less than amount
        """
        _check_amount(amount)
        self._move(normalize_address(sender), normalize_address(to), amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """Move tokens out of owner's balance on behalf of spender.

        An allowance of MAX_ALLOWANCE is treated as infinite and left as is.

        Raises:
            InsufficientAllowanceError: If spender's allowance is below amount
            InsufficientBalanceError: If owner holds less than amount
        """
        _check_amount(amount)
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowanceError(
                f"Insufficient allowance: {spender} may spend {allowed} of {owner}'s "
                f"{self.symbol}, needs {amount}"
            )
        self._move(owner, normalize_address(to), amount)
        if allowed != MAX_ALLOWANCE:
            self._allowances[(owner, spender)] = allowed - amount

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            balances=dict(self._balances),
            allowances=dict(self._allowances),
            total_supply=self._total_supply,
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._balances = dict(snapshot.balances)
        self._allowances = dict(snapshot.allowances)
        self._total_supply = snapshot.total_supply

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {sender} holds {balance} {self.symbol}, needs {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount
        logger.debug(
            "token_transfer",
            token=self.symbol,
            sender=sender,
            to=to,
            amount=amount,
        )


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise InvalidAmountError(f"Invalid amount: {amount}")
