"""Password vault routes."""

from __future__ import annotations

from flask import abort, jsonify, request

from ...services import passwords as vault
from ..helpers import dump, dump_all, found, id_list, json_payload, login_required, scope, validated
from . import bp
from .forms import PasswordEntryForm


@bp.get("/")
@login_required
def list_entries():
    entries = vault.list_entries(search=request.args.get("q"), **scope())
    groups = vault.group_by_category(entries)
    return jsonify(
        {
            "groups": [
                {"category": name, "entries": dump_all(items)} for name, items in groups.items()
            ],
            "count": len(entries),
        }
    )


@bp.post("/")
@login_required
def create_entry():
    form = validated(PasswordEntryForm)
    return jsonify(dump(vault.create_entry(form.cleaned(), **scope()))), 201


@bp.get("/<int:entry_id>")
@login_required
def get_entry(entry_id: int):
    return jsonify(dump(found(vault.get_entry(entry_id, **scope()))))


@bp.put("/<int:entry_id>")
@login_required
def update_entry(entry_id: int):
    form = validated(PasswordEntryForm)
    return jsonify(dump(found(vault.update_entry(entry_id, form.cleaned(), **scope()))))


@bp.delete("/<int:entry_id>")
@login_required
def delete_entry(entry_id: int):
    if not vault.delete_entries([entry_id], **scope()):
        abort(404)
    return "", 204


@bp.post("/bulk-delete")
@login_required
def bulk_delete_entries():
    return jsonify({"deleted": vault.delete_entries(id_list(json_payload()), **scope())})
