from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)
