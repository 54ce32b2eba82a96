from abc import ABC, abstractmethod


class BaseDatabaseDriver(ABC):
    """A backing-store client with an explicit connect/disconnect lifecycle."""

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass
