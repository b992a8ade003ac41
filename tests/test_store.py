"""Unit tests for storage error translation."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from academy.core.exceptions import UpstreamIOError
from academy.core.store import storage_errors


class _Session:
    def __init__(self) -> None:
        self.rollbacks = 0

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.mark.asyncio
async def test_database_error_becomes_upstream_error() -> None:
    db = _Session()
    with pytest.raises(UpstreamIOError) as exc_info:
        async with storage_errors(db, "loading dataset"):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))
    assert exc_info.value.status_code == 503
    assert db.rollbacks == 1


@pytest.mark.asyncio
async def test_integrity_error_passes_through() -> None:
    db = _Session()
    with pytest.raises(IntegrityError):
        async with storage_errors(db, "creating enrollment"):
            raise IntegrityError("INSERT", {}, Exception("duplicate"))
    assert db.rollbacks == 1


@pytest.mark.asyncio
async def test_no_error_no_rollback() -> None:
    db = _Session()
    async with storage_errors(db, "listing students"):
        pass
    assert db.rollbacks == 0
