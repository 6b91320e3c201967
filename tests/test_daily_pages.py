import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select

from app.db import AppAsyncSessionLocal
from app.db_handlers import DailyPageDBHandler
from app.models import DailyPage


async def count_pages(day: date) -> int:
    async with AppAsyncSessionLocal() as session:
        result = await session.execute(
            select(func.count()).select_from(DailyPage).where(DailyPage.date == day)
        )
        return result.scalar_one()


@pytest.mark.asyncio
async def test_get_or_create_is_idempotent():
    handler = DailyPageDBHandler()
    day = date(2025, 3, 10)

    first = await handler.get_or_create(day)
    second = await handler.get_or_create(day)

    assert first.id == second.id
    assert first.date == day
    assert await count_pages(day) == 1


@pytest.mark.asyncio
async def test_concurrent_first_access_creates_one_page():
    handler = DailyPageDBHandler()
    day = date(2025, 3, 11)

    pages = await asyncio.gather(*(handler.get_or_create(day) for _ in range(5)))

    assert len({page.id for page in pages}) == 1
    assert await count_pages(day) == 1


@pytest.mark.asyncio
async def test_distinct_dates_get_distinct_pages():
    handler = DailyPageDBHandler()

    monday = await handler.get_or_create(date(2025, 3, 10))
    tuesday = await handler.get_or_create(date(2025, 3, 11))

    assert monday.id != tuesday.id
