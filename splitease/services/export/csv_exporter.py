"""
CSV Export Service

Builds pandas DataFrames for a session's expenses, balances and settlement
plan, with member IDs resolved to display names, and writes them as CSV.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from splitease.models.session import Session
from splitease.services.calculations import compute_member_totals, compute_settlement_plan
from splitease.utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_KINDS = ("expenses", "balances", "settlements")


class CSVExporter:
    """Turn a session into tabular exports"""

    def __init__(self, session: Session):
        self.session = session
        self._names: Dict[str, str] = session.member_names()

    def _name(self, member_id: str) -> str:
        # stale references are exported as the raw ID
        return self._names.get(member_id, member_id)

    def expenses_frame(self) -> pd.DataFrame:
        rows: List[dict] = []
        for expense in sorted(self.session.expenses, key=lambda e: e.date):
            rows.append({
                "date": expense.date.date().isoformat(),
                "title": expense.title,
                "amount": float(expense.amount),
                "paid_by": self._name(expense.paid_by),
                "participants": ", ".join(self._name(p) for p in expense.participants),
                "split": expense.split.value,
                "description": expense.description or "",
            })
        return pd.DataFrame(
            rows,
            columns=["date", "title", "amount", "paid_by", "participants", "split", "description"],
        )

    def balances_frame(self) -> pd.DataFrame:
        totals = compute_member_totals(self.session.members, self.session.expenses)
        rows = [
            {
                "member": self._name(member_id),
                "paid": float(values["paid"]),
                "share": float(values["share"]),
                "balance": float(values["balance"]),
            }
            for member_id, values in totals.items()
        ]
        return pd.DataFrame(rows, columns=["member", "paid", "share", "balance"])

    def settlements_frame(self) -> pd.DataFrame:
        totals = compute_member_totals(self.session.members, self.session.expenses)
        balances = {member_id: values["balance"] for member_id, values in totals.items()}
        plan = compute_settlement_plan(balances, self.session.settlements_completed)
        rows = [
            {"from": self._name(s.from_member), "to": self._name(s.to_member), "amount": float(s.amount)}
            for s in plan
        ]
        return pd.DataFrame(rows, columns=["from", "to", "amount"])

    def frame(self, kind: str) -> pd.DataFrame:
        if kind == "expenses":
            return self.expenses_frame()
        if kind == "balances":
            return self.balances_frame()
        if kind == "settlements":
            return self.settlements_frame()
        raise ValueError(f"Unknown export kind '{kind}', expected one of {', '.join(EXPORT_KINDS)}")

    def default_filename(self, kind: str) -> str:
        return f"{self.session.title.replace(' ', '_')}_{kind}.csv"

    def to_csv(self, kind: str, path: Optional[Union[str, Path]] = None) -> str:
        """Return the CSV text for ``kind``, also writing it to ``path`` when given"""
        df = self.frame(kind)
        csv_text = df.to_csv(index=False, float_format="%.2f")

        if path is not None:
            output_path = Path(path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(csv_text, encoding="utf-8")
            logger.info(f"Exported {len(df)} {kind} rows for session {self.session.id} to {output_path}")

        return csv_text
