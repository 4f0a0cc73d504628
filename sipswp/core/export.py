"""Ledger summaries and CSV export."""

from __future__ import annotations

import csv
import io
from typing import List, Optional, Sequence

from sipswp.core.engine import round_half_up
from sipswp.domain.models import LedgerSummary, YearRecord

CSV_BOM = "\ufeff"
NOT_APPLICABLE = "-"


def format_inr(value: float, prefix: str = "") -> str:
    """Whole-unit amount with Indian digit grouping, e.g. 12,34,567."""
    amount = round_half_up(value)
    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups: List[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    return f"{prefix}{sign}{digits}"


def summarize_ledger(ledger: Sequence[YearRecord]) -> LedgerSummary:
    if not ledger:
        return LedgerSummary(total_contributed=0.0, total_withdrawn=0.0, total_interest=0.0, final_balance=0.0)
    last = ledger[-1]
    return LedgerSummary(
        total_contributed=last.cumulative_contributed,
        total_withdrawn=last.cumulative_withdrawn,
        total_interest=sum(record.interest_earned for record in ledger),
        final_balance=last.end_balance,
    )


def _amount(value: Optional[float], prefix: str) -> str:
    if value is None:
        return NOT_APPLICABLE
    return format_inr(value, prefix)


def ledger_to_csv(
    ledger: Sequence[YearRecord],
    include_withdrawals: bool = True,
    unit_note: str = "Note: All amounts are in the account's unit of currency",
    prefix: str = "",
) -> str:
    """Spreadsheet-friendly CSV (with a UTF-8 BOM) of a simulation ledger."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow([unit_note])
    writer.writerow([])

    headers = [
        "Year",
        "Start-of-Year Corpus",
        "Monthly SIP",
        "Annual SIP Contribution",
        "Total SIP Invested to Date",
    ]
    if include_withdrawals:
        headers.extend(
            [
                "Monthly SWP Withdrawal",
                "Annual SWP Withdrawal",
                "Total SWP Withdrawals to Date",
            ]
        )
    headers.extend(["Interest Earned This Year", "End-of-Year Corpus"])
    writer.writerow(headers)

    for record in ledger:
        row = [
            record.year,
            format_inr(record.begin_balance, prefix),
            _amount(record.monthly_contribution, prefix),
            format_inr(record.annual_contribution, prefix),
            format_inr(record.cumulative_contributed, prefix),
        ]
        if include_withdrawals:
            row.extend(
                [
                    _amount(record.monthly_withdrawal, prefix),
                    _amount(record.annual_withdrawal, prefix),
                    format_inr(record.cumulative_withdrawn, prefix) if record.cumulative_withdrawn else NOT_APPLICABLE,
                ]
            )
        row.extend([format_inr(record.interest_earned, prefix), format_inr(record.end_balance, prefix)])
        writer.writerow(row)

    return CSV_BOM + buffer.getvalue()
