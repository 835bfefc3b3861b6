"""Load the full ledger into an immutable snapshot for the accounting engine."""

from ..core.models import LedgerSnapshot
from .repositories.allocations_repo import AllocationsRepository
from .repositories.contributions_repo import ContributionsRepository
from .repositories.members_repo import MembersRepository
from .repositories.securities_repo import SecuritiesRepository
from .repositories.transactions_repo import TransactionsRepository


def load_snapshot() -> LedgerSnapshot:
    """Fetch every ledger table fresh. Transactions come in trade-date order."""
    return LedgerSnapshot(
        members=MembersRepository().list_all(),
        contributions=ContributionsRepository().list_all(),
        securities=SecuritiesRepository().list_all(),
        transactions=TransactionsRepository().list_all(),
        allocations=AllocationsRepository().list_all(),
    )
