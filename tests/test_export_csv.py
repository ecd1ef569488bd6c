from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from zipfile import ZipFile

from finboard.services import debts, export_csv


def _read(path: Path) -> list[dict[str, str]]:
    with path.open(encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def test_write_rows_serializes_values(tmp_path):
    path = export_csv.write_rows(
        rows=[{"name": "x", "when": date(2024, 5, 6), "flag": True, "missing": None}],
        columns=("name", "when", "flag", "missing"),
        output_path=tmp_path / "nested" / "out.csv",
    )

    assert _read(path) == [{"name": "x", "when": "2024-05-06", "flag": "yes", "missing": ""}]


def test_debt_export_includes_interest_columns(debt_factory, session_factory, user_id, tmp_path):
    debt_factory(borrower_name="Zed", amount=1000.0, interest_rate=12.0, lent_date=date(2023, 1, 1))

    path = export_csv.export_debts_csv(
        user_id=user_id,
        session_factory=session_factory,
        output_path=tmp_path / "debts.csv",
        as_of=date(2024, 1, 1),
    )

    rows = _read(path)
    assert list(rows[0]) == list(export_csv.DEBT_COLUMNS)
    assert rows[0]["borrower_name"] == "Zed"
    assert float(rows[0]["total_with_interest"]) == 1120.0
    assert rows[0]["is_overdue"] == "no"


def test_expense_export_is_user_scoped(expense_factory, session_factory, other_user_id, tmp_path):
    expense_factory(amount=12.5, category="Books")

    mine = export_csv.export_expenses_csv(
        user_id=session_factory.user.id, session_factory=session_factory, output_path=tmp_path / "a.csv"
    )
    theirs = export_csv.export_expenses_csv(
        user_id=other_user_id, session_factory=session_factory, output_path=tmp_path / "b.csv"
    )

    assert [(r["category"], r["amount"]) for r in _read(mine)] == [("Books", "12.5")]
    assert _read(theirs) == []


def test_bundle_leaves_passwords_out_by_default(session_factory, user_id, account_factory, tmp_path):
    account_factory(bank_name="Zip Bank")

    archive = export_csv.export_bundle(
        user_id=user_id, session_factory=session_factory, output_dir=tmp_path
    )

    assert archive.name.startswith(f"finboard_export_user{user_id}_")
    with ZipFile(archive) as bundle:
        names = set(bundle.namelist())
        accounts_csv = bundle.read("accounts.csv").decode("utf-8")
    assert names == {"accounts.csv", "expenses.csv", "incomes.csv", "investments.csv", "debts.csv", "loans.csv"}
    assert "Zip Bank" in accounts_csv


def test_bundle_with_passwords(session_factory, user_id, tmp_path):
    archive = export_csv.export_bundle(
        user_id=user_id, session_factory=session_factory, output_dir=tmp_path, include_passwords=True
    )

    with ZipFile(archive) as bundle:
        assert "passwords.csv" in bundle.namelist()


def test_retention_keeps_newest_archives(session_factory, user_id, other_user_id, tmp_path):
    foreign = tmp_path / f"finboard_export_user{other_user_id}_old.zip"
    foreign.write_bytes(b"")
    for _ in range(3):
        export_csv.export_bundle(user_id=user_id, session_factory=session_factory, output_dir=tmp_path)

    export_csv.export_bundle(
        user_id=user_id, session_factory=session_factory, output_dir=tmp_path, retention=2
    )

    remaining = sorted(tmp_path.glob(f"finboard_export_user{user_id}_*.zip"))
    assert len(remaining) == 2
    assert foreign.exists()


def test_loan_export_uses_lender_columns(loan_factory, session_factory, user_id, tmp_path):
    loan = loan_factory(lender_name="Credit Union", amount=300.0)
    debts.add_loan_repayment(
        loan.id, amount=100.0, repayment_date=date(2024, 2, 1), user_id=user_id, session_factory=session_factory
    )

    rows = _read(
        export_csv.export_loans_csv(
            user_id=user_id, session_factory=session_factory, output_path=tmp_path / "loans.csv"
        )
    )

    assert rows[0]["lender_name"] == "Credit Union"
    assert rows[0]["status"] == "PARTIALLY_PAID"
    assert float(rows[0]["remaining_amount"]) == 200.0
