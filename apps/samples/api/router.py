from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from datarepo.config import settings
from datarepo.database.manager import DatabaseManager
from datarepo.exceptions.errors import BusinessException
from datarepo.response import ResponseModel
from ..models import Sample, SampleCreate
from ..service import AsyncSampleService

router = APIRouter()


async def get_db():
    """Get database session."""
    manager = DatabaseManager.get_instance()
    async for session in manager.sql.get_async_session():
        yield session


def get_sample_service(
    db: AsyncSession = Depends(get_db)
) -> AsyncSampleService:
    """Dependency: create AsyncSampleService on the request's session."""
    return AsyncSampleService(db)


def _not_found(sample_id: int) -> BusinessException:
    return BusinessException(f"Sample {sample_id} not found", status_code=404, code=404)


@router.get("/list")
async def list_samples(
    page: int = 1,
    page_size: int = settings.DEFAULT_PAGE_SIZE,
    service: AsyncSampleService = Depends(get_sample_service)
):
    """One page of samples ordered by id."""
    items = await service.get_page(page, page_size, Sample.id)
    total = await service.count()
    return ResponseModel.page(items, page=page, page_size=page_size, total=total)


@router.get("/all")
async def list_all_samples(service: AsyncSampleService = Depends(get_sample_service)):
    return ResponseModel.success(data=await service.get_all())


@router.get("/count")
async def count_samples(service: AsyncSampleService = Depends(get_sample_service)):
    return ResponseModel.success(data={"count": await service.count()})


@router.get("/find")
async def find_sample(
    name: str,
    service: AsyncSampleService = Depends(get_sample_service)
):
    """Look a sample up by exact name; 409 when the name is not unique."""
    sample = await service.get_by_name(name)
    if sample is None:
        raise BusinessException(f"No sample named '{name}'", status_code=404, code=404)
    return ResponseModel.success(data=sample)


@router.get("/{sample_id}")
async def get_sample(
    sample_id: int,
    service: AsyncSampleService = Depends(get_sample_service)
):
    sample = await service.get(sample_id)
    if sample is None:
        raise _not_found(sample_id)
    return ResponseModel.success(data=sample)


@router.post("/")
async def create_sample(
    payload: SampleCreate,
    service: AsyncSampleService = Depends(get_sample_service)
):
    sample = await service.add(Sample(name=payload.name))
    return ResponseModel.success(data=sample)


@router.post("/batch")
async def create_samples(
    payload: List[SampleCreate],
    service: AsyncSampleService = Depends(get_sample_service)
):
    """Create several samples in one commit."""
    samples = await service.add_all([Sample(name=item.name) for item in payload])
    return ResponseModel.success(data=samples)


@router.put("/{sample_id}")
async def update_sample(
    sample_id: int,
    payload: SampleCreate,
    service: AsyncSampleService = Depends(get_sample_service)
):
    """Replace the sample's fields; 404 if it does not exist."""
    sample = await service.update(Sample(name=payload.name), sample_id)
    if sample is None:
        raise _not_found(sample_id)
    return ResponseModel.success(data=sample)


@router.delete("/{sample_id}")
async def delete_sample(
    sample_id: int,
    service: AsyncSampleService = Depends(get_sample_service)
):
    sample = await service.get(sample_id)
    if sample is None:
        raise _not_found(sample_id)
    affected = await service.delete(sample)
    return ResponseModel.success(data={"deleted": affected})
