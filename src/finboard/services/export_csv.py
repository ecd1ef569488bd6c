"""CSV export helpers."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any, Callable, Iterable, Sequence
from zipfile import ZipFile

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from . import accounts, cashflow, debts, investments, passwords

logger = get_logger(__name__)

ACCOUNT_COLUMNS = (
    "id",
    "bank_name",
    "holder_name",
    "account_number",
    "branch_name",
    "branch_code",
    "account_type",
    "balance",
    "opening_date",
    "nickname",
)
EXPENSE_COLUMNS = ("id", "occurred_on", "category", "amount", "description", "payment_method", "account_id")
INCOME_COLUMNS = ("id", "received_on", "category", "amount", "description", "source", "account_id")
INVESTMENT_COLUMNS = (
    "id",
    "name",
    "investment_type",
    "symbol",
    "quantity",
    "purchase_price",
    "current_price",
    "cost_basis",
    "current_value",
    "purchase_date",
    "maturity_date",
    "account_id",
)
_INTEREST_COLUMNS = ("total_with_interest", "total_repaid", "accrued_interest", "remaining_amount", "is_overdue")
DEBT_COLUMNS = (
    "id",
    "borrower_name",
    "borrower_contact",
    "amount",
    "interest_rate",
    "lent_date",
    "due_date",
    "status",
    *_INTEREST_COLUMNS,
)
LOAN_COLUMNS = (
    "id",
    "lender_name",
    "lender_contact",
    "amount",
    "interest_rate",
    "loan_date",
    "due_date",
    "status",
    *_INTEREST_COLUMNS,
)
PASSWORD_COLUMNS = (
    "website_name",
    "website_url",
    "username",
    "password",
    "transaction_pin",
    "category",
    "validity",
    "notes",
)


def _serialize_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def write_rows(
    *, rows: Iterable[Any], columns: Sequence[str], output_path: Path
) -> Path:
    """Write objects or mappings to CSV with a fixed column order.

    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(columns), quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for item in rows:
            if isinstance(item, dict):
                row = {name: _serialize_value(item.get(name)) for name in columns}
            else:
                row = {name: _serialize_value(getattr(item, name, None)) for name in columns}
            writer.writerow(row)
    return output_path


def export_accounts_csv(*, user_id: int, session_factory: SessionFactory, output_path: Path) -> Path:
    records = accounts.list_accounts(user_id=user_id, session_factory=session_factory)
    return write_rows(rows=records, columns=ACCOUNT_COLUMNS, output_path=output_path)


def export_expenses_csv(*, user_id: int, session_factory: SessionFactory, output_path: Path) -> Path:
    records = cashflow.list_records(cashflow.EXPENSE, user_id=user_id, session_factory=session_factory)
    return write_rows(rows=records, columns=EXPENSE_COLUMNS, output_path=output_path)


def export_incomes_csv(*, user_id: int, session_factory: SessionFactory, output_path: Path) -> Path:
    records = cashflow.list_records(cashflow.INCOME, user_id=user_id, session_factory=session_factory)
    return write_rows(rows=records, columns=INCOME_COLUMNS, output_path=output_path)


def export_investments_csv(
    *, user_id: int, session_factory: SessionFactory, output_path: Path
) -> Path:
    records = investments.list_investments(user_id=user_id, session_factory=session_factory)
    return write_rows(rows=records, columns=INVESTMENT_COLUMNS, output_path=output_path)


def export_debts_csv(
    *,
    user_id: int,
    session_factory: SessionFactory,
    output_path: Path,
    as_of: date | None = None,
) -> Path:
    """Debts with the interest breakdown evaluated at ``as_of``."""

    records = debts.list_debts(user_id=user_id, session_factory=session_factory)
    rows = [debts.describe(debts.DEBT, record, as_of=as_of) for record in records]
    return write_rows(rows=rows, columns=DEBT_COLUMNS, output_path=output_path)


def export_loans_csv(
    *,
    user_id: int,
    session_factory: SessionFactory,
    output_path: Path,
    as_of: date | None = None,
) -> Path:
    records = debts.list_loans(user_id=user_id, session_factory=session_factory)
    rows = [debts.describe(debts.LOAN, record, as_of=as_of) for record in records]
    return write_rows(rows=rows, columns=LOAN_COLUMNS, output_path=output_path)


def export_passwords_csv(
    *, user_id: int, session_factory: SessionFactory, output_path: Path
) -> Path:
    """Plain-text credentials; callers decide where this file may live."""

    records = passwords.list_entries(user_id=user_id, session_factory=session_factory)
    return write_rows(rows=records, columns=PASSWORD_COLUMNS, output_path=output_path)


EXPORTERS: dict[str, Callable[..., Path]] = {
    "accounts": export_accounts_csv,
    "expenses": export_expenses_csv,
    "incomes": export_incomes_csv,
    "investments": export_investments_csv,
    "debts": export_debts_csv,
    "loans": export_loans_csv,
    "passwords": export_passwords_csv,
}


def prune_old_exports(directory: Path, *, user_id: int, keep: int) -> None:
    """Remove a user's export archives beyond the retention count."""

    archives = sorted(
        directory.glob(f"finboard_export_user{user_id}_*.zip"),
        key=lambda file: file.stat().st_mtime,
        reverse=True,
    )
    for old in archives[keep:]:
        try:
            old.unlink()
        except OSError:
            logger.warning("Could not remove old export", extra={"path": str(old)})


def export_bundle(
    *,
    user_id: int,
    session_factory: SessionFactory,
    output_dir: Path,
    include_passwords: bool = False,
    retention: int | None = None,
) -> Path:
    """Write every CSV export into a single timestamped zip and return its path.

    With ``retention`` set, only that many of the user's newest archives are kept.
    """

    output_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    zip_path = output_dir / f"finboard_export_user{user_id}_{stamp}.zip"
    with TemporaryDirectory() as tmp:
        tmp_dir = Path(tmp)
        with ZipFile(zip_path, "w") as bundle:
            for name, exporter in EXPORTERS.items():
                if name == "passwords" and not include_passwords:
                    continue
                path = exporter(
                    user_id=user_id,
                    session_factory=session_factory,
                    output_path=tmp_dir / f"{name}.csv",
                )
                bundle.write(path, arcname=path.name)
    if retention is not None:
        prune_old_exports(output_dir, user_id=user_id, keep=retention)
    logger.info(
        "Export bundle written",
        extra={"user_id": user_id, "path": str(zip_path), "passwords": include_passwords},
    )
    return zip_path
