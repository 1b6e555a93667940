"""Two-asset constant product pool engine with integer accounting.

Implements the x * y = k pricing curve with a fixed 0.3% fee on input.
The full input is credited to the reserve while only the fee-reduced input
prices the trade, so each swap strictly grows k and the fee accrues to
claim holders:
- Swap output: Δout = γ·Δin · R_out / (R_in + γ·Δin), γ = 997/1000
- Reserves after swap: (R_in + Δin, R_out - Δout)
- Deposits mint claims proportionally, withdrawals burn them for a
  proportional share of both reserves
"""

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
from typing import Hashable, Iterator, Mapping, Optional, Tuple

from dex_pool.config import DEFAULT_SETTINGS, PoolSettings
from dex_pool.core.errors import (
    ArithmeticOverflow,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientMintedClaims,
    InsufficientOutput,
    InvalidAmount,
    NoLiquidity,
    ReentrantCall,
    TransferFailed,
)
from dex_pool.core.events import (
    EventListener,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swap,
)
from dex_pool.core.interfaces import AssetCustody
from dex_pool.core.ledger import ClaimLedger
from dex_pool.core.math import (
    initial_claims,
    proportional_claims,
    quote_amount_out,
    quote_price,
    withdrawal_amounts,
)
from dex_pool.core.trade import SwapDirection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolSnapshot:
    """Immutable view of pool accounting state at a point in time."""
    reserve_x: int
    reserve_y: int
    total_claims: int
    balances: Mapping[Hashable, int]

    @property
    def k(self) -> int:
        """The constant product."""
        return self.reserve_x * self.reserve_y

    @property
    def is_empty(self) -> bool:
        return self.total_claims == 0


class TransferKind(Enum):
    PULL = "pull"  # Participant to pool custody
    PUSH = "push"  # Pool custody to participant


@dataclass(frozen=True)
class _Transfer:
    """A completed custody movement, kept so it can be reversed on failure."""
    kind: TransferKind
    asset: Hashable
    account: Hashable
    amount: int


@dataclass
class _Operation:
    """Transfers made and events emitted by the operation in progress."""
    transfers: list[_Transfer] = field(default_factory=list)
    events: list[PoolEvent] = field(default_factory=list)


@dataclass(eq=False)
class Pool:
    """Constant product pool for one asset pair.

    The pool is created empty and stays bound to ``asset_x`` and ``asset_y``
    for its whole life; draining it only zeroes the counters. Reserves are
    the pool's own counters and are authoritative for pricing, independent of
    what custody reports.

    Every state-changing operation is atomic: it runs under the pool lock,
    and on any failure the counters and claim balances are restored and
    completed transfers are reversed before the error propagates. Events
    reach the log only when their operation commits.

    Operations do not nest. A custody or listener callback may query the
    pool, but a state-changing call made from inside an operation raises
    ``ReentrantCall``.
    """
    asset_x: Hashable
    asset_y: Hashable
    custody: AssetCustody
    settings: PoolSettings = DEFAULT_SETTINGS
    reserve_x: int = field(default=0, init=False)
    reserve_y: int = field(default=0, init=False)
    _event_log: deque = field(default_factory=deque, init=False, repr=False)
    _claims: ClaimLedger = field(default_factory=ClaimLedger, init=False, repr=False)
    _listeners: list[EventListener] = field(default_factory=list, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)
    _in_operation: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.asset_x == self.asset_y:
            raise ValueError(f"pool assets must differ, got {self.asset_x!r} twice")
        self._event_log = deque(maxlen=self.settings.event_log_size)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def total_claims(self) -> int:
        return self._claims.total_supply

    @property
    def k(self) -> int:
        """The constant product invariant."""
        return self.reserve_x * self.reserve_y

    @property
    def events(self) -> list[PoolEvent]:
        """Committed events, oldest first.

        Only the most recent ``settings.event_log_size`` events are kept;
        use ``subscribe`` to observe every event.
        """
        with self._lock:
            return list(self._event_log)

    def balance_of(self, holder: Hashable) -> int:
        """Claim balance of ``holder``."""
        with self._lock:
            return self._claims.balance_of(holder)

    def get_reserves(self) -> Tuple[int, int]:
        with self._lock:
            return self.reserve_x, self.reserve_y

    def get_price(self) -> int:
        """Units of X per unit of Y, scaled by ``settings.price_scale``.

        Raises:
            NoLiquidity: If the pool holds no Y
        """
        with self._lock:
            return quote_price(self.reserve_x, self.reserve_y, self.settings.price_scale)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Preview a swap against arbitrary reserves without touching state."""
        return quote_amount_out(
            amount_in,
            reserve_in,
            reserve_out,
            self.settings.fee_numerator,
            self.settings.fee_denominator,
        )

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                reserve_x=self.reserve_x,
                reserve_y=self.reserve_y,
                total_claims=self._claims.total_supply,
                balances=self._claims.balances(),
            )

    def subscribe(self, listener: EventListener) -> None:
        """Register a callable that receives each event as it is emitted.

        Listeners run inside the operation; a listener that raises aborts
        the operation and rolls it back.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    def deposit(self, holder: Hashable, amount_x: int, amount_y: int) -> int:
        """Add liquidity and mint claims to ``holder``.

        The first deposit (or the first after a full drain) mints the
        geometric mean of the two amounts. Later deposits mint the smaller
        of the two proportional shares; any excess of the over-supplied
        asset stays in the pool.

        Returns:
            Number of claims minted

        Raises:
            InvalidAmount: If either amount is not a positive integer
            InsufficientMintedClaims: If the deposit mints zero claims
            TransferFailed: If custody declines either pull
        """
        self._require_amount("amount_x", amount_x)
        self._require_amount("amount_y", amount_y)

        with self._atomic() as op:
            total = self._claims.total_supply
            if total == 0:
                minted = initial_claims(amount_x, amount_y)
            else:
                minted = proportional_claims(
                    amount_x, amount_y, self.reserve_x, self.reserve_y, total
                )
            if minted == 0:
                raise InsufficientMintedClaims(
                    f"deposit ({amount_x}, {amount_y}) mints zero claims "
                    f"against reserves ({self.reserve_x}, {self.reserve_y})"
                )

            self._require_bound("reserve_x", self.reserve_x + amount_x)
            self._require_bound("reserve_y", self.reserve_y + amount_y)
            self._require_bound("total_claims", total + minted)

            self._pull(op, self.asset_x, holder, amount_x)
            self._pull(op, self.asset_y, holder, amount_y)

            self.reserve_x += amount_x
            self.reserve_y += amount_y
            self._claims.mint(holder, minted)

            self._emit(op, LiquidityAdded(holder, amount_x, amount_y, minted))
            self._check_invariants()

        logger.debug(
            "deposit holder=%r amount_x=%d amount_y=%d minted=%d",
            holder, amount_x, amount_y, minted,
        )
        return minted

    def withdraw(self, holder: Hashable, claims_burned: int) -> Tuple[int, int]:
        """Burn claims and pay ``holder`` their share of both reserves.

        Bookkeeping is committed before the assets are pushed out, so a
        custody callback observes a consistent reserve/claim ratio.

        Returns:
            (amount_x, amount_y) paid out

        Raises:
            InvalidAmount: If claims_burned is not a positive integer
            InsufficientBalance: If holder owns fewer claims
            InsufficientLiquidity: If either share truncates to zero
            TransferFailed: If custody declines either push
        """
        self._require_amount("claims_burned", claims_burned)

        with self._atomic() as op:
            balance = self._claims.balance_of(holder)
            if balance < claims_burned:
                raise InsufficientBalance(
                    f"holder {holder!r} has {balance} claims, cannot burn {claims_burned}"
                )

            amount_x, amount_y = withdrawal_amounts(
                claims_burned, self.reserve_x, self.reserve_y, self._claims.total_supply
            )
            if amount_x == 0 or amount_y == 0:
                raise InsufficientLiquidity(
                    f"burning {claims_burned} claims yields ({amount_x}, {amount_y})"
                )

            self._claims.burn(holder, claims_burned)
            self.reserve_x -= amount_x
            self.reserve_y -= amount_y

            self._push(op, self.asset_x, holder, amount_x)
            self._push(op, self.asset_y, holder, amount_y)

            self._emit(op, LiquidityRemoved(holder, amount_x, amount_y, claims_burned))
            self._check_invariants()

        logger.debug(
            "withdraw holder=%r burned=%d amount_x=%d amount_y=%d",
            holder, claims_burned, amount_x, amount_y,
        )
        return amount_x, amount_y

    def swap(self, caller: Hashable, direction: SwapDirection, amount_in: int) -> int:
        """Trade ``amount_in`` of one asset for the other.

        Args:
            caller: Identity paying the input and receiving the output
            direction: SwapDirection.X_TO_Y or SwapDirection.Y_TO_X
            amount_in: Gross input amount, fee included

        Returns:
            Output amount sent to caller

        Raises:
            InvalidAmount: If amount_in is not a positive integer
            NoLiquidity: If the pool is empty
            InsufficientOutput: If the output truncates to zero
            TransferFailed: If custody declines the pull or push
        """
        direction = SwapDirection(direction)
        self._require_amount("amount_in", amount_in)

        with self._atomic(claims=False) as op:
            if self.reserve_x == 0 or self.reserve_y == 0:
                raise NoLiquidity("cannot swap against an empty pool")

            k_before = self.k
            if direction is SwapDirection.X_TO_Y:
                asset_in, asset_out = self.asset_x, self.asset_y
                reserve_in, reserve_out = self.reserve_x, self.reserve_y
            else:
                asset_in, asset_out = self.asset_y, self.asset_x
                reserve_in, reserve_out = self.reserve_y, self.reserve_x

            amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
            if amount_out == 0:
                raise InsufficientOutput(
                    f"swap of {amount_in} yields zero output against "
                    f"reserves ({reserve_in}, {reserve_out})"
                )
            self._require_bound("reserve_in", reserve_in + amount_in)

            self._pull(op, asset_in, caller, amount_in)
            self._push(op, asset_out, caller, amount_out)

            if direction is SwapDirection.X_TO_Y:
                self.reserve_x += amount_in
                self.reserve_y -= amount_out
            else:
                self.reserve_y += amount_in
                self.reserve_x -= amount_out

            self._emit(op, Swap(caller, amount_in, amount_out, direction))
            self._check_invariants(k_before=k_before)

        logger.debug(
            "swap caller=%r direction=%s amount_in=%d amount_out=%d",
            caller, direction.value, amount_in, amount_out,
        )
        return amount_out

    def swap_x_for_y(self, caller: Hashable, amount_in: int) -> int:
        return self.swap(caller, SwapDirection.X_TO_Y, amount_in)

    def swap_y_for_x(self, caller: Hashable, amount_in: int) -> int:
        return self.swap(caller, SwapDirection.Y_TO_X, amount_in)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _atomic(self, claims: bool = True) -> Iterator[_Operation]:
        """Run an operation under the lock with all-or-nothing semantics.

        Args:
            claims: Whether the operation can change claim balances. Swaps
                pass False so the rollback point is only the two reserves.

        Raises:
            ReentrantCall: If another operation on this pool is in progress
                on the current thread
        """
        with self._lock:
            if self._in_operation:
                raise ReentrantCall("cannot start a pool operation from inside another")
            self._in_operation = True
            reserves = (self.reserve_x, self.reserve_y)
            balances = self._claims.balances() if claims else None
            op = _Operation()
            try:
                yield op
            except Exception:
                self.reserve_x, self.reserve_y = reserves
                if balances is not None:
                    self._claims.restore(balances)
                self._reverse(op.transfers)
                raise
            else:
                self._event_log.extend(op.events)
            finally:
                self._in_operation = False

    def _pull(self, op: _Operation, asset: Hashable, source: Hashable, amount: int) -> None:
        if not self.custody.pull(asset, source, amount):
            logger.warning("pull of %d %r from %r declined", amount, asset, source)
            raise TransferFailed(f"pull of {amount} {asset!r} from {source!r} failed")
        op.transfers.append(_Transfer(TransferKind.PULL, asset, source, amount))

    def _push(self, op: _Operation, asset: Hashable, recipient: Hashable, amount: int) -> None:
        if not self.custody.push(asset, recipient, amount):
            logger.warning("push of %d %r to %r declined", amount, asset, recipient)
            raise TransferFailed(f"push of {amount} {asset!r} to {recipient!r} failed")
        op.transfers.append(_Transfer(TransferKind.PUSH, asset, recipient, amount))

    def _reverse(self, transfers: list[_Transfer]) -> None:
        """Undo completed transfers, newest first."""
        for transfer in reversed(transfers):
            if transfer.kind is TransferKind.PULL:
                reversed_ok = self.custody.push(transfer.asset, transfer.account, transfer.amount)
            else:
                reversed_ok = self.custody.pull(transfer.asset, transfer.account, transfer.amount)
            if reversed_ok:
                logger.info("reversed %s of %d %r for %r",
                            transfer.kind.value, transfer.amount, transfer.asset, transfer.account)
            else:
                logger.error("could not reverse %s of %d %r for %r",
                             transfer.kind.value, transfer.amount, transfer.asset, transfer.account)

    def _emit(self, op: _Operation, event: PoolEvent) -> None:
        op.events.append(event)
        for listener in list(self._listeners):
            listener(event)

    def _require_amount(self, name: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidAmount(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidAmount(f"{name} must be > 0, got {value}")
        self._require_bound(name, value)

    def _require_bound(self, name: str, value: int) -> int:
        if value > self.settings.max_amount:
            raise ArithmeticOverflow(f"{name} {value} exceeds {self.settings.max_amount}")
        return value

    def _check_invariants(self, k_before: Optional[int] = None) -> None:
        empty_x = self.reserve_x == 0
        empty_y = self.reserve_y == 0
        empty_claims = self._claims.total_supply == 0
        if not (empty_x == empty_y == empty_claims):
            raise RuntimeError(
                f"inconsistent pool state: reserves ({self.reserve_x}, {self.reserve_y}), "
                f"claims {self._claims.total_supply}"
            )
        if self.reserve_x < 0 or self.reserve_y < 0:
            raise RuntimeError(f"negative reserves ({self.reserve_x}, {self.reserve_y})")
        if k_before is not None and self.k < k_before:
            raise RuntimeError(f"constant product decreased: {self.k} < {k_before}")
