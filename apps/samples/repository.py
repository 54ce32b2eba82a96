"""Sample module repository implementations."""

from typing import List, Optional
from datarepo.repository.base import AsyncBaseRepository, BaseRepository
from .models import Sample


class SampleRepository(BaseRepository[Sample, int]):
    """Sample repository."""

    def __init__(self, session):
        super().__init__(session, Sample)

    def get_by_name(self, name: str) -> Optional[Sample]:
        """Find the sample with this exact name."""
        return self.find(name=name)

    def search(self, fragment: str) -> List[Sample]:
        """Samples whose name contains `fragment`, ordered by id."""
        return sorted(self.find_all(Sample.name.contains(fragment)), key=lambda s: s.id)


class AsyncSampleRepository(AsyncBaseRepository[Sample, int]):
    """Async sample repository."""

    def __init__(self, session):
        super().__init__(session, Sample)

    async def get_by_name(self, name: str) -> Optional[Sample]:
        """Find the sample with this exact name."""
        return await self.find(name=name)

    async def search(self, fragment: str) -> List[Sample]:
        """Samples whose name contains `fragment`, ordered by id."""
        return sorted(await self.find_all(Sample.name.contains(fragment)), key=lambda s: s.id)
