from abc import ABC, abstractmethod

from .document import Node


class BaseScraper(ABC):
    """Network collaborator used by the orchestrator.

    Implementations raise on any transport problem; retrying is the caller's
    job.
    """

    @property
    @abstractmethod
    def platform_name(self) -> str: ...

    @abstractmethod
    async def fetch_task_listing(self, url: str) -> list[str]: ...

    @abstractmethod
    async def fetch_document(self, url: str) -> Node: ...

    async def aclose(self) -> None:
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
