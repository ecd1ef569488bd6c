"""Budget routes."""

from __future__ import annotations

from flask import abort, jsonify

from ...models import Budget
from ...services import budgeting
from ..helpers import dump, dump_all, found, login_required, scope, validated
from . import bp
from .forms import BudgetForm, BudgetLinesForm


def _dump_budget(budget: Budget) -> dict:
    return dump(budget, lines=dump_all(budget.lines))


@bp.get("/")
@login_required
def list_budgets():
    return jsonify({"budgets": [_dump_budget(b) for b in budgeting.list_budgets(**scope())]})


@bp.post("/")
@login_required
def create_budget():
    form = validated(BudgetForm)
    budget = budgeting.create_budget(
        period_start=form.period_start,
        period_end=form.period_end,
        label=form.label,
        lines=form.lines,
        **scope(),
    )
    return jsonify(_dump_budget(budget)), 201


@bp.get("/<int:budget_id>")
@login_required
def get_budget(budget_id: int):
    return jsonify(_dump_budget(found(budgeting.get_budget(budget_id, **scope()))))


@bp.put("/<int:budget_id>/lines")
@login_required
def replace_lines(budget_id: int):
    form = validated(BudgetLinesForm)
    budget = budgeting.replace_lines(budget_id, form.lines, label=form.label, **scope())
    return jsonify(_dump_budget(found(budget)))


@bp.delete("/<int:budget_id>")
@login_required
def delete_budget(budget_id: int):
    if not budgeting.delete_budget(budget_id, **scope()):
        abort(404)
    return "", 204


@bp.get("/<int:budget_id>/variance")
@login_required
def budget_variance(budget_id: int):
    variances = found(budgeting.budget_variances(budget_id, **scope()))
    return jsonify(
        {
            "budget_id": budget_id,
            "variances": [v.to_dict() for v in variances],
            "planned_total": round(sum(v.planned for v in variances), 2),
            "actual_total": round(sum(v.actual for v in variances), 2),
        }
    )
