"""Report routes: dashboard summary, monthly trend and file exports."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from flask import abort, current_app, g, jsonify, request, send_file

from ...extensions import get_session_factory
from ...services import cashflow, export_csv, reports
from ..helpers import date_arg, login_required, scope
from . import bp


def _export_path(filename: str) -> Path:
    config = current_app.config["FINBOARD_CONFIG"]
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return config.exports_dir / f"user{g.user_id}_{stamp}_{filename}"


def _months_arg() -> int:
    try:
        months = int(request.args.get("months", 6))
    except ValueError:
        raise ValueError("months must be an integer") from None
    if not 1 <= months <= 60:
        raise ValueError("months must be between 1 and 60")
    return months


@bp.get("/summary")
@login_required
def summary():
    return jsonify(reports.financial_summary(today=date_arg("as_of"), **scope()))


@bp.get("/trend")
@login_required
def trend():
    expenses = cashflow.list_records(cashflow.EXPENSE, **scope())
    incomes = cashflow.list_records(cashflow.INCOME, **scope())
    frame = reports.monthly_trend(
        expenses=expenses, incomes=incomes, months=_months_arg(), today=date_arg("as_of")
    )
    return jsonify({"months": reports.trend_records(frame)})


@bp.get("/export/<entity>.csv")
@login_required
def export_entity(entity: str):
    exporter = export_csv.EXPORTERS.get(entity)
    if exporter is None:
        abort(404)
    path = exporter(output_path=_export_path(f"{entity}.csv"), **scope())
    return send_file(path, mimetype="text/csv", as_attachment=True, download_name=f"{entity}.csv")


@bp.get("/export.zip")
@login_required
def export_all():
    config = current_app.config["FINBOARD_CONFIG"]
    include_passwords = request.args.get("include_passwords", "").lower() in {"1", "true", "yes"}
    path = export_csv.export_bundle(
        user_id=g.user_id,
        session_factory=get_session_factory(),
        output_dir=config.exports_dir,
        include_passwords=include_passwords,
        retention=config.EXPORT_RETENTION,
    )
    return send_file(path, mimetype="application/zip", as_attachment=True, download_name=path.name)


@bp.get("/spending.png")
@login_required
def spending_chart():
    expenses = cashflow.list_records(
        cashflow.EXPENSE, start=date_arg("start"), end=date_arg("end"), **scope()
    )
    path = reports.export_spending_png(expenses=expenses, output_path=_export_path("spending.png"))
    return send_file(path, mimetype="image/png")


@bp.get("/report.pdf")
@login_required
def pdf_report():
    path = reports.export_pdf_report(
        output_path=_export_path("report.pdf"),
        months=_months_arg(),
        today=date_arg("as_of"),
        **scope(),
    )
    return send_file(path, mimetype="application/pdf", as_attachment=True, download_name="finboard_report.pdf")
