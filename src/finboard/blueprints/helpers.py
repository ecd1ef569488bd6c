"""Request helpers shared by the JSON blueprints."""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any, Callable, Iterable, Optional, Type, TypeVar

from flask import abort, g, request, session
from sqlmodel import SQLModel

from ..errors import ValidationError
from ..extensions import get_session_factory
from ..logging_config import get_logger
from ..services.auth import get_user

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

SESSION_USER_KEY = "user_id"


def login_required(view: F) -> F:
    """Reject the request with 401 unless a user is logged in; sets ``g.user_id``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            abort(401)
        if get_user(user_id, session_factory=get_session_factory()) is None:
            session.clear()
            abort(401)
        g.user_id = user_id
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def scope() -> dict[str, Any]:
    """Keyword arguments every service call needs for the current user."""

    return {"user_id": g.user_id, "session_factory": get_session_factory()}


def json_payload() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError({"body": ["Expected a JSON object."]})
    return data


def validated(form_cls: Type[T], data: Optional[dict[str, Any]] = None) -> T:
    """Bind request data to a form and raise ``ValidationError`` when invalid."""

    form = form_cls.from_mapping(json_payload() if data is None else data)  # type: ignore[attr-defined]
    if not form.validate():
        logger.warning(
            "Form validation failed",
            extra={"form": form_cls.__name__, "fields": sorted(form.errors)},
        )
        raise ValidationError(form.errors)
    return form


def found(value: Optional[T]) -> T:
    """Translate a service ``None`` (missing or not owned) into a 404."""

    if value is None:
        abort(404)
    return value


def id_list(data: dict[str, Any], key: str = "ids") -> list[int]:
    raw = data.get(key)
    if not isinstance(raw, list) or not raw:
        raise ValidationError({key: ["Provide a non-empty list of ids."]})
    try:
        return [int(item) for item in raw]
    except (TypeError, ValueError):
        raise ValidationError({key: ["Ids must be integers."]}) from None


def dump(record: SQLModel, **extra: Any) -> dict[str, Any]:
    payload = record.model_dump(mode="json")
    payload.update(extra)
    return payload


def dump_all(records: Iterable[SQLModel]) -> list[dict[str, Any]]:
    return [dump(record) for record in records]


def date_arg(name: str) -> Optional[date]:
    """Parse an optional ``YYYY-MM-DD`` query-string argument."""

    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError({name: ["Enter a valid date (YYYY-MM-DD)."]}) from None
