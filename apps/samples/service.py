from typing import List, Optional
from loguru import logger
from datarepo.service.base import AsyncBaseService, BaseService
from .models import Sample
from .repository import AsyncSampleRepository, SampleRepository


class SampleService(BaseService[Sample, int]):
    def __init__(self, session=None):
        super().__init__(Sample, session)

    def _build_repository(self, session) -> SampleRepository:
        return SampleRepository(session)

    def get_by_name(self, name: str) -> Optional[Sample]:
        return self.repository.get_by_name(name)

    def search(self, fragment: str) -> List[Sample]:
        return self.repository.search(fragment)

    def rename(self, id: int, new_name: str) -> Optional[Sample]:
        """Rename sample `id`; None if it does not exist."""
        renamed = self.update(Sample(id=id, name=new_name), id)
        if renamed is not None:
            logger.info(f"Sample {id} renamed to {new_name}")
        return renamed


class AsyncSampleService(AsyncBaseService[Sample, int]):
    def __init__(self, session=None):
        super().__init__(Sample, session)

    def _build_repository(self, session) -> AsyncSampleRepository:
        return AsyncSampleRepository(session)

    async def get_by_name(self, name: str) -> Optional[Sample]:
        return await self.repository.get_by_name(name)

    async def search(self, fragment: str) -> List[Sample]:
        return await self.repository.search(fragment)

    async def rename(self, id: int, new_name: str) -> Optional[Sample]:
        """Rename sample `id`; None if it does not exist."""
        renamed = await self.update(Sample(id=id, name=new_name), id)
        if renamed is not None:
            logger.info(f"Sample {id} renamed to {new_name}")
        return renamed
