"""
Async repository tests; the same contract as the blocking repository.
"""
import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import IntegrityError, MultipleResultsFound
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.samples.models import Sample
from apps.samples.repository import AsyncSampleRepository
from datarepo.exceptions.errors import InvalidPageError


@pytest.mark.asyncio
async def test_add_and_get_round_trip(async_sample_repo: AsyncSampleRepository):
    sample = await async_sample_repo.add(Sample(name="Turtle"))

    assert sample.id is not None
    fetched = await async_sample_repo.get(sample.id)
    assert (fetched.id, fetched.name) == (sample.id, "Turtle")
    assert await async_sample_repo.get(sample.id + 100) is None


@pytest.mark.asyncio
async def test_get_page(async_sample_repo: AsyncSampleRepository, async_five_samples):
    page = await async_sample_repo.get_page(2, 2, Sample.id)
    assert [s.id for s in page] == [3, 4]

    with pytest.raises(InvalidPageError):
        await async_sample_repo.get_page(0, 2, Sample.id)


@pytest.mark.asyncio
async def test_get_all_and_count(async_sample_repo: AsyncSampleRepository, async_five_samples):
    assert sorted(s.id for s in await async_sample_repo.get_all()) == [1, 2, 3, 4, 5]
    assert await async_sample_repo.count() == 5


@pytest.mark.asyncio
async def test_find_zero_one_many(async_sample_repo: AsyncSampleRepository):
    await async_sample_repo.add_all([Sample(name="Fox"), Sample(name="Cat"), Sample(name="Cat")])

    assert await async_sample_repo.find(Sample.name == "Dog") is None
    assert (await async_sample_repo.get_by_name("Fox")).name == "Fox"
    with pytest.raises(MultipleResultsFound):
        await async_sample_repo.find(Sample.name == "Cat")

    cats = await async_sample_repo.find_all(name="Cat")
    assert len(cats) == 2


@pytest.mark.asyncio
async def test_update(async_sample_repo: AsyncSampleRepository):
    fox = await async_sample_repo.add(Sample(name="Fox"))

    updated = await async_sample_repo.update(Sample(name="Dog"), fox.id)
    assert updated.name == "Dog"
    assert (await async_sample_repo.get(fox.id)).name == "Dog"

    assert await async_sample_repo.update(Sample(name="ghost"), 999) is None
    assert await async_sample_repo.update(None, fox.id) is None
    assert await async_sample_repo.count() == 1


@pytest.mark.asyncio
async def test_delete_and_count(async_sample_repo: AsyncSampleRepository, async_five_samples):
    before = await async_sample_repo.count()
    added = await async_sample_repo.add_all([Sample(name="a"), Sample(name="b")])

    assert await async_sample_repo.delete(added[0]) == 1
    assert await async_sample_repo.delete(Sample(id=999, name="ghost")) == 0
    assert await async_sample_repo.count() == before + 2 - 1


@pytest.mark.asyncio
async def test_failed_commit_rolls_back(async_sample_repo: AsyncSampleRepository):
    await async_sample_repo.add(Sample(name="Fox"))

    with pytest.raises(IntegrityError):
        await async_sample_repo.add(Sample(name=None))

    assert await async_sample_repo.count() == 1


@pytest.mark.asyncio
async def test_close_releases_session_once():
    session = AsyncMock(spec=AsyncSession)

    async with AsyncSampleRepository(session) as repo:
        pass
    await repo.close()

    assert repo.disposed
    session.close.assert_awaited_once()
