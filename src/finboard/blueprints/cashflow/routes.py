"""Expense and income routes; both blueprints get the same endpoints."""

from __future__ import annotations

from typing import Type

from flask import Blueprint, abort, jsonify, request

from ...services import cashflow as cashflow_service
from ..forms import FormMixin
from ..helpers import (
    date_arg,
    dump,
    dump_all,
    found,
    id_list,
    json_payload,
    login_required,
    scope,
    validated,
)
from . import expenses_bp, incomes_bp
from .forms import ExpenseForm, IncomeForm


def _register(bp: Blueprint, kind, form_cls: Type[FormMixin]) -> None:
    @bp.get("/")
    @login_required
    def list_records():
        records = cashflow_service.list_records(
            kind,
            start=date_arg("start"),
            end=date_arg("end"),
            category=request.args.get("category") or None,
            **scope(),
        )
        return jsonify(
            {
                "records": dump_all(records),
                "total": cashflow_service.total_for(records),
                "by_category": cashflow_service.totals_by_category(records),
            }
        )

    @bp.post("/")
    @login_required
    def create_record():
        form = validated(form_cls)
        record = cashflow_service.create_record(kind, form.cleaned(), **scope())
        return jsonify(dump(record)), 201

    @bp.get("/<int:record_id>")
    @login_required
    def get_record(record_id: int):
        return jsonify(dump(found(cashflow_service.get_record(kind, record_id, **scope()))))

    @bp.put("/<int:record_id>")
    @login_required
    def update_record(record_id: int):
        form = validated(form_cls)
        record = cashflow_service.update_record(kind, record_id, form.cleaned(), **scope())
        return jsonify(dump(found(record)))

    @bp.delete("/<int:record_id>")
    @login_required
    def delete_record(record_id: int):
        if not cashflow_service.delete_records(kind, [record_id], **scope()):
            abort(404)
        return "", 204

    @bp.post("/bulk-delete")
    @login_required
    def bulk_delete():
        deleted = cashflow_service.delete_records(kind, id_list(json_payload()), **scope())
        return jsonify({"deleted": deleted})


_register(expenses_bp, cashflow_service.EXPENSE, ExpenseForm)
_register(incomes_bp, cashflow_service.INCOME, IncomeForm)
