"""
Inventory valuation engine.

Computes remaining stock, remaining cost and average unit cost for one
product over a date window under FIFO, LIFO or weighted-average costing.
Pure computation over an in-memory snapshot: no I/O, no shared state.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from exceptions import ValuationUnderflowError
from models import TransactionKind

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


class CostingMethod(str, Enum):
    """Costing convention used to value remaining stock."""
    FIFO = "FIFO"
    LIFO = "LIFO"
    WEIGHTED = "weighted"

    @classmethod
    def parse(cls, value: Union["CostingMethod", str]) -> "CostingMethod":
        """Resolve a method from its serialised tag. Only the three exact tags are accepted."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(
            f"Unknown costing method {value!r}; expected one of {[m.value for m in cls]}"
        )


@dataclass
class Lot:
    """Remaining fragment of an entry during a FIFO/LIFO run."""
    quantity_remaining: float
    unit_cost: float
    date: date


@dataclass
class ValuationResult:
    """Outcome of a valuation run."""
    method: CostingMethod
    entries: List = field(default_factory=list)  # Filtered input order, not sorted
    exits: List = field(default_factory=list)
    remaining_stock: float = 0.0
    total_cost: float = 0.0
    average_cost: float = 0.0
    # Exit quantity that found no stock to consume
    unsatisfied_quantity: float = 0.0

    @property
    def has_unsatisfied_exits(self) -> bool:
        return self.unsatisfied_quantity > 0

    @property
    def is_empty(self) -> bool:
        """True when the window held no transactions at all."""
        return not self.entries and not self.exits

    def to_dict(self) -> dict:
        return {
            'method': self.method.value,
            'entries': len(self.entries),
            'exits': len(self.exits),
            'remaining_stock': round(self.remaining_stock, 4),
            'total_cost': round(self.total_cost, 2),
            'average_cost': round(self.average_cost, 2),
            'unsatisfied_quantity': round(self.unsatisfied_quantity, 4),
        }


def as_date(value: DateLike) -> date:
    """Normalise a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Only the calendar part matters; time and zone suffixes such as "Z" are dropped
    return date.fromisoformat(value[:10])


def filter_window(
    transactions: Iterable,
    start_date: DateLike,
    end_date: DateLike,
    product_id: Optional[int] = None,
) -> List:
    """Transactions of the product dated within [start_date, end_date], both ends inclusive."""
    start = as_date(start_date)
    end = as_date(end_date)
    return [
        tx for tx in transactions
        if (product_id is None or tx.product_id == product_id)
        and start <= as_date(tx.transaction_date) <= end
    ]


def _average(total_cost: float, remaining_stock: float) -> float:
    return total_cost / remaining_stock if remaining_stock > 0 else 0.0


def _consume_lots(entries: List, exits: List, newest_first: bool) -> Tuple[float, float, float]:
    """
    Run exits against a lot queue built from the entries.

    Entries are stable-sorted by date (ascending for FIFO, descending for LIFO)
    so entries sharing a date keep their input order. Exits are consumed in
    input order. Returns (remaining_stock, total_cost, unsatisfied_quantity).
    """
    ordered = sorted(entries, key=lambda tx: as_date(tx.transaction_date), reverse=newest_first)
    queue = deque(
        Lot(quantity_remaining=tx.quantity, unit_cost=tx.unit_cost, date=as_date(tx.transaction_date))
        for tx in ordered
    )

    unsatisfied = 0.0
    for exit_tx in exits:
        needed = exit_tx.quantity
        while needed > 0 and queue:
            lot = queue[0]
            if lot.quantity_remaining <= needed:
                needed -= lot.quantity_remaining
                queue.popleft()
            else:
                lot.quantity_remaining -= needed
                needed = 0
        if needed > 0:
            logger.warning(
                f"Exit {getattr(exit_tx, 'id', None)} left {needed:g} units unmatched: no lots remaining"
            )
            unsatisfied += needed

    remaining_stock = sum(lot.quantity_remaining for lot in queue)
    total_cost = sum(lot.quantity_remaining * lot.unit_cost for lot in queue)
    return remaining_stock, total_cost, unsatisfied


def _weighted_average(entries: List, exits: List) -> Tuple[float, float, float]:
    """
    Two passes: all entries accumulate first, then exits are removed at the
    running average taken before each exit. This is not a chronological
    interleaving of entries and exits.
    """
    total_units = 0.0
    total_value = 0.0

    for entry in entries:
        total_units += entry.quantity
        total_value += entry.quantity * entry.unit_cost

    unsatisfied = 0.0
    for exit_tx in exits:
        if total_units > 0:
            if exit_tx.quantity > total_units:
                unsatisfied += exit_tx.quantity - total_units
            current_average = total_value / total_units
            total_value -= exit_tx.quantity * current_average
            total_units -= exit_tx.quantity
        else:
            unsatisfied += exit_tx.quantity

    if unsatisfied > 0:
        logger.warning(f"Weighted valuation left {unsatisfied:g} exit units unmatched")

    return total_units, total_value, unsatisfied


def valuate(
    transactions: Iterable,
    method: Union[CostingMethod, str],
    start_date: DateLike,
    end_date: DateLike,
    *,
    product_id: Optional[int] = None,
    strict: bool = False,
) -> ValuationResult:
    """
    Value a product's stock over a date window.

    Args:
        transactions: Transactions to value (any order); objects exposing
            product_id, kind, quantity, unit_cost and transaction_date
        method: CostingMethod or its tag ("FIFO", "LIFO", "weighted")
        start_date: First day of the window (inclusive)
        end_date: Last day of the window (inclusive)
        product_id: When given, transactions of other products are ignored
        strict: Raise ValuationUnderflowError instead of silently dropping
            exit quantity that finds no stock

    Returns:
        ValuationResult with the filtered entries/exits and the figures
    """
    method = CostingMethod.parse(method)
    window = filter_window(transactions, start_date, end_date, product_id)
    entries = [tx for tx in window if tx.kind == TransactionKind.ENTRY]
    exits = [tx for tx in window if tx.kind == TransactionKind.EXIT]

    if method is CostingMethod.FIFO:
        remaining_stock, total_cost, unsatisfied = _consume_lots(entries, exits, newest_first=False)
    elif method is CostingMethod.LIFO:
        remaining_stock, total_cost, unsatisfied = _consume_lots(entries, exits, newest_first=True)
    elif method is CostingMethod.WEIGHTED:
        remaining_stock, total_cost, unsatisfied = _weighted_average(entries, exits)
    else:  # pragma: no cover
        raise ValueError(f"Unhandled costing method: {method}")

    if strict and unsatisfied > 0:
        raise ValuationUnderflowError(unsatisfied)

    return ValuationResult(
        method=method,
        entries=entries,
        exits=exits,
        remaining_stock=remaining_stock,
        total_cost=total_cost,
        average_cost=_average(total_cost, remaining_stock),
        unsatisfied_quantity=unsatisfied,
    )
