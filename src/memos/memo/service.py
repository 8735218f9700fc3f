from typing import Any, Optional
from uuid import UUID

from memos.db import Database
from memos.errors import NotFoundError, RecordNotFound, ValidationError
from memos.logger import get_logger
from memos.memo.repository import MemoRepository
from memos.memo.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_ORDER,
    DEFAULT_SORT_BY,
    CreateMemoRequest,
    MemoResponse,
    PaginatedResult,
    PaginationParams,
    PatchMemoRequest,
    UpdateMemoRequest,
    parse_request,
)

logger = get_logger(__name__)


def _not_found(memo_id: UUID) -> NotFoundError:
    return NotFoundError(f"Memo with id {memo_id} not found")


class MemoService:
    """
    Memo use cases: validates input, applies defaults, merges partial updates
    and shapes stored rows into responses. Holds no state besides the
    repository, so a new instance per request is fine.
    """

    def __init__(self, db: Database):
        self.repository = MemoRepository(db)

    def get_all(self, params: Any = None) -> PaginatedResult:
        """List one page of memos, optionally filtered by completion."""
        params = parse_request(PaginationParams, params)

        limit = params.limit if params.limit is not None else DEFAULT_LIMIT
        offset = params.offset if params.offset is not None else DEFAULT_OFFSET
        sort_by = params.sort_by or DEFAULT_SORT_BY
        order = params.order or DEFAULT_ORDER

        memos, total = self.repository.find_all(
            limit=limit,
            offset=offset,
            completed=params.completed,
            sort_by=sort_by,
            order=order,
        )
        logger.info("memos.listed", count=len(memos), total=total, limit=limit, offset=offset)

        return PaginatedResult(
            data=[MemoResponse.from_row(m) for m in memos],
            total=total,
            limit=limit,
            offset=offset,
        )

    def get_by_id(self, memo_id: Any) -> MemoResponse:
        memo_id = self._parse_id(memo_id)
        return MemoResponse.from_row(self._get_existing(memo_id))

    def create(self, dto: Any) -> MemoResponse:
        dto = parse_request(CreateMemoRequest, dto)

        memo = self.repository.create(
            title=dto.title,
            description=dto.description,
            date_to=dto.date_to,
        )
        return MemoResponse.from_row(memo)

    def update(self, memo_id: Any, dto: Any) -> MemoResponse:
        """Replace every mutable field of an existing memo."""
        memo_id = self._parse_id(memo_id)
        dto = parse_request(UpdateMemoRequest, dto)

        memo = self._save(
            memo_id,
            title=dto.title,
            description=dto.description,
            date_to=dto.date_to,
            completed=dto.completed,
        )
        logger.info("memo.updated", memo_id=str(memo_id))
        return MemoResponse.from_row(memo)

    def patch(self, memo_id: Any, dto: Any) -> MemoResponse:
        """
        Apply only the fields present in dto; omitted fields keep their stored
        value. An explicit description of None clears the description.
        """
        memo_id = self._parse_id(memo_id)
        dto = parse_request(PatchMemoRequest, dto)
        existing = self._get_existing(memo_id)

        provided = dto.model_fields_set
        merged = {
            field: getattr(dto, field) if field in provided else existing[field]
            for field in ("title", "description", "date_to", "completed")
        }

        memo = self._save(memo_id, **merged)
        logger.info("memo.patched", memo_id=str(memo_id), fields=sorted(provided))
        return MemoResponse.from_row(memo)

    def delete(self, memo_id: Any) -> None:
        memo_id = self._parse_id(memo_id)
        if not self.repository.delete(memo_id):
            logger.warning("memo.delete_missing", memo_id=str(memo_id))
            raise _not_found(memo_id)
        logger.info("memo.deleted", memo_id=str(memo_id))

    def toggle_complete(self, memo_id: Any) -> MemoResponse:
        """Flip the completion flag, leaving every other field untouched."""
        memo_id = self._parse_id(memo_id)
        existing = self._get_existing(memo_id)

        memo = self._save(
            memo_id,
            title=existing["title"],
            description=existing["description"],
            date_to=existing["date_to"],
            completed=not existing["completed"],
        )
        logger.info("memo.toggled", memo_id=str(memo_id), completed=memo["completed"])
        return MemoResponse.from_row(memo)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _parse_id(memo_id: Any) -> UUID:
        if isinstance(memo_id, UUID):
            return memo_id
        try:
            return UUID(str(memo_id))
        except ValueError as e:
            raise ValidationError(f"Invalid memo id: {memo_id}") from e

    def _get_existing(self, memo_id: UUID) -> dict:
        memo = self.repository.find_by_id(memo_id)
        if memo is None:
            raise _not_found(memo_id)
        return memo

    def _save(
        self,
        memo_id: UUID,
        title: str,
        description: Optional[str],
        date_to,
        completed: bool,
    ) -> dict:
        try:
            return self.repository.update(
                memo_id=memo_id,
                title=title,
                description=description,
                date_to=date_to,
                completed=completed,
            )
        except RecordNotFound as e:
            raise _not_found(memo_id) from e
