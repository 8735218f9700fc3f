from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from memos.db import Database
from memos.errors import RecordNotFound
from memos.logger import get_logger
from memos.memo.schemas import SortField, SortOrder

logger = get_logger(__name__)

MEMO_COLUMNS = "id, title, description, date_to, completed, created_at, updated_at"


class MemoRepository:
    """
    Repository for memo data access.
    Encapsulates all SQL and queries for the memos table.
    """

    def __init__(self, db: Database):
        self.db = db

    def create(self, title: str, description: Optional[str], date_to: datetime) -> dict:
        """Create a new memo. The store assigns the id and both timestamps."""
        memo = self.db.fetch_one(
            f"""
            INSERT INTO memos (title, description, date_to, completed, created_at, updated_at)
            VALUES (%s, %s, %s, false, now(), now())
            RETURNING {MEMO_COLUMNS}
            """,
            (title, description, date_to),
        )
        logger.info("memo.created", memo_id=str(memo["id"]))
        return memo

    def find_by_id(self, memo_id: UUID) -> Optional[dict]:
        """Get memo by ID, or None when it does not exist."""
        return self.db.fetch_one(
            f"SELECT {MEMO_COLUMNS} FROM memos WHERE id = %s",
            (memo_id,),
        )

    def find_all(
        self,
        limit: int,
        offset: int,
        completed: Optional[bool] = None,
        sort_by: str = SortField.CREATED_AT.value,
        order: str = SortOrder.DESC.value,
    ) -> Tuple[List[dict], int]:
        """
        Return one page of memos and the number of memos matching the filter.

        The total ignores limit and offset. An offset at or past the total
        yields an empty page without running the page query. Unrecognized sort
        fields order by created_at; any order other than "asc" is descending.
        Rows sharing a sort value are ordered by id so pages do not overlap.
        """
        where = ""
        params: list = []
        if completed is not None:
            where = " WHERE completed = %s"
            params.append(completed)

        column = SortField.parse(sort_by).value
        direction = SortOrder.parse(order).value.upper()

        with self.db.get_cursor() as cur:
            cur.execute("SELECT COUNT(*) AS total FROM memos" + where, tuple(params))
            total = cur.fetchone()["total"]

            if offset >= total:
                memos = []
            else:
                cur.execute(
                    f"SELECT {MEMO_COLUMNS} FROM memos{where}"
                    f" ORDER BY {column} {direction}, id {direction}"
                    " LIMIT %s OFFSET %s",
                    (*params, limit, offset),
                )
                memos = cur.fetchall()

        logger.debug(
            "memo.find_all",
            found=len(memos),
            total=total,
            completed=completed,
            sort_by=column,
            order=direction,
        )
        return memos, total

    def update(
        self,
        memo_id: UUID,
        title: str,
        description: Optional[str],
        date_to: datetime,
        completed: bool,
    ) -> dict:
        """
        Replace every mutable field of a memo and refresh updated_at.

        Raises:
            RecordNotFound: no memo has this id
        """
        memo = self.db.fetch_one(
            f"""
            UPDATE memos
            SET title = %s,
                description = %s,
                date_to = %s,
                completed = %s,
                updated_at = GREATEST(now(), updated_at)
            WHERE id = %s
            RETURNING {MEMO_COLUMNS}
            """,
            (title, description, date_to, completed, memo_id),
        )
        if memo is None:
            logger.warning("memo.update_missing", memo_id=str(memo_id))
            raise RecordNotFound(f"Memo with id {memo_id} not found")
        return memo

    def delete(self, memo_id: UUID) -> bool:
        """Delete a memo. Returns False when there was nothing to delete."""
        deleted = self.db.execute("DELETE FROM memos WHERE id = %s", (memo_id,))
        return deleted > 0
