"""Account routes."""

from __future__ import annotations

from flask import abort, jsonify

from ...services import accounts as account_service
from ..helpers import dump, dump_all, found, id_list, json_payload, login_required, scope, validated
from . import bp
from .forms import AccountForm


@bp.get("/")
@login_required
def list_accounts():
    records = account_service.list_accounts(**scope())
    return jsonify(
        {
            "accounts": dump_all(records),
            "total_balance": round(sum(a.balance for a in records), 2),
        }
    )


@bp.post("/")
@login_required
def create_account():
    form = validated(AccountForm)
    account = account_service.create_account(form.cleaned(), **scope())
    return jsonify(dump(account)), 201


@bp.get("/<int:account_id>")
@login_required
def get_account(account_id: int):
    return jsonify(dump(found(account_service.get_account(account_id, **scope()))))


@bp.put("/<int:account_id>")
@login_required
def update_account(account_id: int):
    form = validated(AccountForm)
    account = account_service.update_account(account_id, form.cleaned(), **scope())
    return jsonify(dump(found(account)))


@bp.delete("/<int:account_id>")
@login_required
def delete_account(account_id: int):
    if not account_service.delete_account(account_id, **scope()):
        abort(404)
    return "", 204


@bp.post("/bulk-delete")
@login_required
def bulk_delete_accounts():
    deleted = account_service.bulk_delete_accounts(id_list(json_payload()), **scope())
    return jsonify({"deleted": deleted})
