"""Debt routes; loans reuse ``register_routes`` with their own kind and form."""

from __future__ import annotations

from typing import Type

from flask import Blueprint, abort, jsonify, request

from ...services import debts as debt_service
from ..forms import FormMixin
from ..helpers import date_arg, found, id_list, json_payload, login_required, scope, validated
from . import bp
from .forms import DebtForm, RepaymentForm


def register_routes(bp: Blueprint, kind, form_cls: Type[FormMixin]) -> None:
    """Attach list/CRUD/repayment/summary endpoints for ``kind`` to ``bp``."""

    def _describe(record):
        return debt_service.describe(kind, record, as_of=date_arg("as_of"))

    @bp.get("/")
    @login_required
    def list_records():
        records = debt_service.list_records(kind, **scope())
        records = debt_service.filter_records(
            kind, records, text=request.args.get("q"), status=request.args.get("status")
        )
        return jsonify({"records": [_describe(r) for r in records]})

    @bp.get("/summary")
    @login_required
    def summary():
        records = debt_service.list_records(kind, **scope())
        return jsonify(debt_service.summarize(records, as_of=date_arg("as_of")))

    @bp.post("/")
    @login_required
    def create_record():
        form = validated(form_cls)
        record = debt_service.create_record(kind, form.cleaned(), **scope())
        return jsonify(_describe(record)), 201

    @bp.get("/<int:record_id>")
    @login_required
    def get_record(record_id: int):
        return jsonify(_describe(found(debt_service.get_record(kind, record_id, **scope()))))

    @bp.put("/<int:record_id>")
    @login_required
    def update_record(record_id: int):
        form = validated(form_cls)
        record = debt_service.update_record(kind, record_id, form.cleaned(), **scope())
        return jsonify(_describe(found(record)))

    @bp.delete("/<int:record_id>")
    @login_required
    def delete_record(record_id: int):
        if not debt_service.delete_record(kind, record_id, **scope()):
            abort(404)
        return "", 204

    @bp.post("/bulk-delete")
    @login_required
    def bulk_delete():
        deleted = debt_service.delete_records(kind, id_list(json_payload()), **scope())
        return jsonify({"deleted": deleted})

    @bp.post("/<int:record_id>/repayments")
    @login_required
    def add_repayment(record_id: int):
        form = validated(RepaymentForm)
        record = debt_service.add_repayment(
            kind,
            record_id,
            amount=form.amount,
            repayment_date=form.repayment_date,
            notes=form.notes,
            **scope(),
        )
        return jsonify(_describe(found(record))), 201

    @bp.delete("/<int:record_id>/repayments/<int:repayment_id>")
    @login_required
    def delete_repayment(record_id: int, repayment_id: int):
        record = debt_service.delete_repayment(kind, record_id, repayment_id, **scope())
        return jsonify(_describe(found(record)))


register_routes(bp, debt_service.DEBT, DebtForm)
