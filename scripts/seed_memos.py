"""Seed sample memos into the database."""
from datetime import datetime, timedelta, timezone

from memos.config import Config
from memos.db import Database
from memos.memo import MemoService
from memos.memo.schemas import MAX_LIMIT

SAMPLE_MEMOS = [
    {"title": "Renew passport", "description": "Photos and form DS-82", "days": 30},
    {"title": "Quarterly report", "description": "Numbers from finance first", "days": 7},
    {"title": "Dentist appointment", "description": None, "days": 3},
    {"title": "Call the landlord", "description": "About the heating", "days": 1},
]


def main():
    config = Config.from_env()
    service = MemoService(Database(config.database_url))

    existing = {m.title for m in service.get_all({"limit": MAX_LIMIT}).data}
    now = datetime.now(timezone.utc)

    for sample in SAMPLE_MEMOS:
        if sample["title"] in existing:
            print(f"Skipping {sample['title']} - already exists")
            continue

        memo = service.create(
            {
                "title": sample["title"],
                "description": sample["description"],
                "date_to": now + timedelta(days=sample["days"]),
            }
        )
        print(f"Created: {memo.title} (id={memo.id})")


if __name__ == "__main__":
    main()
