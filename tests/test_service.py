"""
Service layer tests: delegation, session ownership and the Turtle/Fox/Cat walkthrough.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import patch
from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.samples.models import Sample
from apps.samples.service import AsyncSampleService, SampleService
from datarepo.database.initializer import DatabaseInitializer
from datarepo.database.manager import DatabaseManager
from datarepo.database.sql_driver import SQLDriver
from datarepo.service import BaseService


def test_scenario(session: Session):
    service = SampleService(session)
    service.add_all([Sample(name="Turtle"), Sample(name="Fox"), Sample(name="Cat")])
    assert service.count() == 3

    fox = service.find(Sample.name == "Fox")
    assert fox is not None and fox.name == "Fox"

    fox.name = "Dog"
    service.update(fox, fox.id)
    assert service.get(fox.id).name == "Dog"

    turtle = service.find(name="Turtle")
    assert service.delete(turtle) == 1
    assert service.count() == 2


@pytest.mark.asyncio
async def test_scenario_async(async_session: AsyncSession):
    service = AsyncSampleService(async_session)
    await service.add_all([Sample(name="Turtle"), Sample(name="Fox"), Sample(name="Cat")])
    assert await service.count() == 3

    fox = await service.find(Sample.name == "Fox")
    fox.name = "Dog"
    await service.update(fox, fox.id)
    assert (await service.get(fox.id)).name == "Dog"

    turtle = await service.find(name="Turtle")
    assert await service.delete(turtle) == 1
    assert await service.count() == 2


def test_rename(session: Session):
    service = SampleService(session)
    cat = service.add(Sample(name="Cat"))

    assert service.rename(cat.id, "Lynx").name == "Lynx"
    assert service.get_by_name("Lynx").id == cat.id
    assert service.rename(cat.id + 1, "Nobody") is None


@pytest.mark.asyncio
async def test_rename_async(async_session: AsyncSession):
    service = AsyncSampleService(async_session)
    cat = await service.add(Sample(name="Cat"))

    assert (await service.rename(cat.id, "Lynx")).name == "Lynx"
    assert [s.name for s in await service.search("yn")] == ["Lynx"]


def test_paging_through_service(session: Session):
    service = BaseService[Sample, int](Sample, session)
    service.add_all([Sample(name=f"s{i}") for i in range(1, 6)])

    assert [s.name for s in service.get_page(2, 2, Sample.id)] == ["s3", "s4"]
    assert len(service.find_all(Sample.name.startswith("s"))) == 5
    assert len(service.get_all()) == 5


def test_close_releases_session_once(session: Session):
    with patch.object(session, "close", wraps=session.close) as close:
        with SampleService(session) as service:
            service.count()
        service.close()

    assert service.disposed
    close.assert_called_once()


@pytest.fixture
def file_driver(tmp_path, monkeypatch):
    """A file-backed driver installed as the DatabaseManager singleton."""
    driver = SQLDriver(f"sqlite:///{tmp_path / 'service.db'}")
    DatabaseInitializer(driver).create_all()
    monkeypatch.setattr(DatabaseManager, "_instance", SimpleNamespace(sql=driver))
    yield driver
    driver.engine.dispose()


def test_service_opens_session_from_configured_database(file_driver: SQLDriver):
    with SampleService() as service:
        service.add(Sample(name="Fox"))

    # a second unit of work sees the committed row
    with SampleService() as service:
        assert service.get_by_name("Fox") is not None
        assert service.count() == 1


@pytest.mark.asyncio
async def test_async_service_opens_session_from_configured_database(file_driver: SQLDriver):
    async with AsyncSampleService() as service:
        await service.add(Sample(name="Fox"))

    async with AsyncSampleService() as service:
        assert await service.count() == 1

    await file_driver.async_engine.dispose()
