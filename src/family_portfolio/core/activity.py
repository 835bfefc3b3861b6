"""Recent ledger activity for the summary view."""

from .models import ActivityItem, ActivityType, LedgerSnapshot, TransactionType


def _fmt_quantity(quantity) -> str:
    text = f"{quantity:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def recent_activity(snapshot: LedgerSnapshot, limit: int = 5) -> list[ActivityItem]:
    """Latest contributions and trades, newest first."""
    members = {m.id: m.name for m in snapshot.members}
    symbols = {s.id: s.symbol for s in snapshot.securities}

    items: list[ActivityItem] = []
    for c in snapshot.contributions:
        name = members.get(c.member_id, "Unknown")
        items.append(ActivityItem(
            activity_type=ActivityType.CONTRIBUTION,
            activity_date=c.contribution_date,
            description=f"{name} contributed",
            amount=c.amount,
            record_id=c.id,
            member_name=name,
        ))
    for t in snapshot.transactions:
        symbol = symbols.get(t.security_id, "")
        verb = "Bought" if t.transaction_type == TransactionType.BUY else "Sold"
        items.append(ActivityItem(
            activity_type=ActivityType(t.transaction_type.value),
            activity_date=t.trade_date,
            description=f"{verb} {_fmt_quantity(t.quantity)} {symbol}".rstrip(),
            amount=t.total_amount,
            record_id=t.id,
            symbol=symbol,
        ))

    items.sort(key=lambda i: (i.activity_date, i.record_id or 0), reverse=True)
    return items[:limit]
