"""Investment and target routes."""

from __future__ import annotations

from flask import abort, jsonify

from ...models import Investment
from ...services import investments as investment_service
from ..helpers import dump, found, id_list, json_payload, login_required, scope, validated
from . import bp
from .forms import InvestmentForm, TargetForm


def _dump_investment(investment: Investment) -> dict:
    return dump(
        investment,
        cost_basis=investment.cost_basis,
        current_value=investment.current_value,
        gain=round(investment.current_value - investment.cost_basis, 2),
    )


@bp.get("/")
@login_required
def list_investments():
    records = investment_service.list_investments(**scope())
    return jsonify(
        {
            "investments": [_dump_investment(i) for i in records],
            "totals": investment_service.portfolio_totals(records),
            "by_type": investment_service.value_by_type(records),
        }
    )


@bp.post("/")
@login_required
def create_investment():
    form = validated(InvestmentForm)
    investment = investment_service.create_investment(form.cleaned(), **scope())
    return jsonify(_dump_investment(investment)), 201


@bp.get("/<int:investment_id>")
@login_required
def get_investment(investment_id: int):
    return jsonify(_dump_investment(found(investment_service.get_investment(investment_id, **scope()))))


@bp.put("/<int:investment_id>")
@login_required
def update_investment(investment_id: int):
    form = validated(InvestmentForm)
    investment = investment_service.update_investment(investment_id, form.cleaned(), **scope())
    return jsonify(_dump_investment(found(investment)))


@bp.delete("/<int:investment_id>")
@login_required
def delete_investment(investment_id: int):
    if not investment_service.delete_investments([investment_id], **scope()):
        abort(404)
    return "", 204


@bp.post("/bulk-delete")
@login_required
def bulk_delete_investments():
    deleted = investment_service.delete_investments(id_list(json_payload()), **scope())
    return jsonify({"deleted": deleted})


@bp.get("/targets")
@login_required
def list_targets():
    targets = investment_service.list_targets(**scope())
    holdings = investment_service.list_investments(**scope())
    progress = investment_service.target_progress(targets, holdings)
    return jsonify({"targets": [p.to_dict() for p in progress]})


@bp.post("/targets")
@login_required
def save_target():
    form = validated(TargetForm)
    target = investment_service.upsert_target(form.investment_type, form.target_amount, **scope())
    return jsonify(dump(target)), 201


@bp.delete("/targets/<int:target_id>")
@login_required
def delete_target(target_id: int):
    if not investment_service.delete_target(target_id, **scope()):
        abort(404)
    return "", 204
