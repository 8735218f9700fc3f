"""
Server-rendered front end.

The index page renders the first page of memos; every other route returns an
HTML fragment meant to be swapped into the page by htmx.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from flask import Blueprint, current_app, render_template, request

from memos.errors import ValidationError
from memos.logger import get_logger
from memos.memo import MemoService

bp = Blueprint("web", __name__)
logger = get_logger(__name__)

FORM_DATE_FORMAT = "%Y-%m-%dT%H:%M"


def memo_service() -> MemoService:
    return MemoService(current_app.db)


def parse_form_date(value: str) -> datetime:
    """Parse a datetime-local input value, interpreted as UTC."""
    try:
        return datetime.strptime(value, FORM_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError) as e:
        raise ValidationError("Invalid date format. Expected YYYY-MM-DDTHH:MM") from e


def form_description() -> Optional[str]:
    description = request.form.get("description", "")
    return description or None


@bp.route("/")
def index():
    result = memo_service().get_all()
    return render_template("pages/index.html", memos=result.data, total=result.total)


@bp.route("/web/memos", methods=["GET"])
def memo_list():
    result = memo_service().get_all(request.args.to_dict())
    return render_template("components/memo_list.html", memos=result.data)


@bp.route("/web/memos/new", methods=["GET"])
def new_memo_form():
    return render_template("components/memo_form.html", memo=None)


@bp.route("/web/memos", methods=["POST"])
def create_memo():
    service = memo_service()
    service.create(
        {
            "title": request.form.get("title", ""),
            "description": form_description(),
            "date_to": parse_form_date(request.form.get("date_to", "")),
        }
    )
    logger.debug("web.memo_created")

    result = service.get_all()
    return render_template("components/memo_list.html", memos=result.data)


@bp.route("/web/memos/<uuid:memo_id>/edit", methods=["GET"])
def edit_memo_form(memo_id: UUID):
    memo = memo_service().get_by_id(memo_id)
    return render_template("components/memo_form.html", memo=memo)


@bp.route("/web/memos/<uuid:memo_id>", methods=["PUT"])
def update_memo(memo_id: UUID):
    memo = memo_service().update(
        memo_id,
        {
            "title": request.form.get("title", ""),
            "description": form_description(),
            "date_to": parse_form_date(request.form.get("date_to", "")),
            # Unchecked checkboxes are absent from the form
            "completed": "completed" in request.form,
        },
    )
    return render_template("components/memo_item.html", memo=memo)


@bp.route("/web/memos/<uuid:memo_id>", methods=["DELETE"])
def delete_memo(memo_id: UUID):
    memo_service().delete(memo_id)
    return ""


@bp.route("/web/memos/<uuid:memo_id>/toggle", methods=["PATCH"])
def toggle_memo(memo_id: UUID):
    memo = memo_service().toggle_complete(memo_id)
    return render_template("components/memo_item.html", memo=memo)
