from uuid import UUID

from flask import Blueprint, current_app, jsonify, request

from memos.errors import ValidationError
from memos.memo import MemoService

bp = Blueprint("memos", __name__)


def memo_service() -> MemoService:
    return MemoService(current_app.db)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@bp.route("", methods=["GET"])
def list_memos():
    """List memos with pagination, completion filter and sorting."""
    result = memo_service().get_all(request.args.to_dict())
    return jsonify(result.model_dump(mode="json"))


@bp.route("", methods=["POST"])
def create_memo():
    """Create a new memo."""
    memo = memo_service().create(json_body())
    return jsonify(memo.model_dump(mode="json")), 201


@bp.route("/<uuid:memo_id>", methods=["GET"])
def get_memo(memo_id: UUID):
    """Get memo by ID."""
    memo = memo_service().get_by_id(memo_id)
    return jsonify(memo.model_dump(mode="json"))


@bp.route("/<uuid:memo_id>", methods=["PUT"])
def update_memo(memo_id: UUID):
    """Replace all mutable fields of a memo."""
    memo = memo_service().update(memo_id, json_body())
    return jsonify(memo.model_dump(mode="json"))


@bp.route("/<uuid:memo_id>", methods=["PATCH"])
def patch_memo(memo_id: UUID):
    """Update only the fields present in the body."""
    memo = memo_service().patch(memo_id, json_body())
    return jsonify(memo.model_dump(mode="json"))


@bp.route("/<uuid:memo_id>", methods=["DELETE"])
def delete_memo(memo_id: UUID):
    memo_service().delete(memo_id)
    return "", 204


@bp.route("/<uuid:memo_id>/complete", methods=["PATCH"])
def toggle_complete(memo_id: UUID):
    """Flip a memo between completed and incomplete."""
    memo = memo_service().toggle_complete(memo_id)
    return jsonify(memo.model_dump(mode="json"))
