"""Data models for the family portfolio ledger and its derived summaries."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"


class ActivityType(str, Enum):
    CONTRIBUTION = "contribution"
    BUY = "buy"
    SELL = "sell"


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Member:
    name: str
    email: str = ""
    is_admin: bool = False  # read by authorization only, never by the engine
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Contribution:
    """Cash a member deposited into the shared pool."""
    member_id: int
    amount: Decimal
    contribution_date: date
    notes: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Security:
    symbol: str
    name: str = ""
    current_price: Optional[Decimal] = None  # None = price unknown
    price_updated_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def price_or_zero(self) -> Decimal:
        if self.current_price is None:
            return Decimal("0")
        return self.current_price


@dataclass(frozen=True)
class Transaction:
    security_id: int
    transaction_type: TransactionType
    trade_date: date
    quantity: Decimal
    price_per_unit: Decimal
    notes: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def total_amount(self) -> Decimal:
        return self.quantity * self.price_per_unit


@dataclass(frozen=True)
class Allocation:
    """One member's slice of a transaction (amount and fraction of the total)."""
    transaction_id: int
    member_id: int
    amount: Decimal
    percentage: Decimal  # fraction in (0, 1], not 0-100
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Everything the accounting engine reads, fetched fresh before each call."""
    members: tuple[Member, ...] = ()
    contributions: tuple[Contribution, ...] = ()
    securities: tuple[Security, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    allocations: tuple[Allocation, ...] = ()

    def __post_init__(self):
        # Accept lists at the call site, store tuples.
        for name in ("members", "contributions", "securities", "transactions", "allocations"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MemberCash:
    member_id: int
    member_name: str
    total_contributions: Decimal = Decimal("0")
    total_buys: Decimal = Decimal("0")
    total_sells: Decimal = Decimal("0")
    available_cash: Decimal = Decimal("0")


@dataclass(frozen=True)
class MemberSummary:
    member_id: int
    member_name: str
    total_contributions: Decimal
    stock_value: Decimal
    available_cash: Decimal
    total_value: Decimal
    cost_basis: Decimal
    gain_loss: Decimal
    gain_loss_pct: Decimal
    ownership_pct: Decimal  # 0-100


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: Decimal = Decimal("0")
    total_cost_basis: Decimal = Decimal("0")
    total_gain_loss: Decimal = Decimal("0")
    total_gain_loss_pct: Decimal = Decimal("0")
    total_cash: Decimal = Decimal("0")
    members: tuple[MemberSummary, ...] = ()


@dataclass(frozen=True)
class SecurityOwnership:
    member_id: int
    member_name: str
    shares: Decimal
    value: Decimal
    percentage: Decimal  # 0-100 of the security's outstanding shares


@dataclass(frozen=True)
class SecuritySummary:
    security: Security
    shares_owned: Decimal
    current_value: Decimal
    cost_basis: Decimal
    gain_loss: Decimal
    gain_loss_pct: Decimal
    ownership: tuple[SecurityOwnership, ...] = ()


@dataclass(frozen=True)
class SellAllocation:
    """A proposed (not persisted) allocation for a prospective sale."""
    member_id: int
    amount: Decimal
    percentage: Decimal  # fraction, like Allocation.percentage


@dataclass(frozen=True)
class AllocationDraft:
    """Validated allocation awaiting a transaction id."""
    member_id: int
    amount: Decimal
    percentage: Decimal


@dataclass
class ActivityItem:
    activity_type: ActivityType
    activity_date: date
    description: str
    amount: Decimal
    record_id: Optional[int] = None
    member_name: str = ""
    symbol: str = ""
