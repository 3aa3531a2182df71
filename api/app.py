"""Flask JSON API exposing the expense tracker services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from expense_core.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from expense_core.logging_setup import configure_logging
from expense_core.models import format_amount
from expense_core.services import ExpenseService
from expense_core.storage import CSVStorage
from expense_core.validators import validate_relative_path

EXPORT_DIR = "exports"


def create_app(data_dir: Optional[Path] = None) -> Flask:
    app = Flask(__name__)
    configure_logging()

    env_name = os.getenv("EXPENSE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}})
    else:
        allowed_origins = os.getenv("EXPENSE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}})
        else:
            CORS(app)

    root = Path(data_dir or os.getenv("EXPENSE_TRACKER_DATA_DIR", "data"))
    storage = CSVStorage(root)
    expense_service = ExpenseService(storage)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _ordering() -> Tuple[Optional[str], bool]:
        order = (request.args.get("order") or "asc").strip().lower()
        if order not in {"asc", "desc"}:
            raise ValidationError("order must be 'asc' or 'desc'")
        return request.args.get("sort"), order == "desc"

    @app.get("/categories")
    def list_categories():
        return _success({"items": expense_service.categories()})

    @app.get("/expenses")
    def list_expenses():
        sort, descending = _ordering()
        rows = expense_service.rows(sort, descending)
        return _success({
            "items": [{"index": index, **expense.to_dict()} for index, expense in rows],
            "total": format_amount(expense_service.total()),
        })

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = expense_service.add(
            payload.get("amount"),
            payload.get("category"),
            payload.get("date"),
            payload.get("note"),
        )
        return _success(expense.to_dict(), 201)

    @app.delete("/expenses/<int:index>")
    def delete_expense(index: int):
        sort, descending = _ordering()
        expense_service.delete(index, sort, descending)
        return _success({}, 204)

    @app.get("/total")
    def total():
        return _success({"total": format_amount(expense_service.total())})

    @app.post("/export")
    def export_expenses():
        payload = _json_body()
        relative = validate_relative_path(
            payload.get("destination"),
            root,
            "destination",
            required_prefix=EXPORT_DIR,
        )
        target = root / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create {target.parent}") from exc
        expense_service.export(target)
        return _success({
            "destination": relative,
            "exported": len(expense_service.list()),
        })

    return app
