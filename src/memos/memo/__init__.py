"""
Memo

This package provides the repository and service for managing memos.
"""

from memos.memo.repository import MemoRepository
from memos.memo.service import MemoService

__all__ = ["MemoRepository", "MemoService"]
