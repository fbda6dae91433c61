"""
Record store interface.

The hosted database is the system of record. Services depend on this
interface only, so the HTTP adapter can be swapped for a fake in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]
Properties = Dict[str, Any]
Filter = Dict[str, Any]
Sort = Dict[str, str]


class RecordStore(ABC):
    """Typed create/update/query/get over named collections"""

    @abstractmethod
    async def create(self, collection_id: str, properties: Properties, title: Optional[str] = None) -> Record:
        """
        Create a record in a collection.

        Raises:
            StoreUnavailableError: If the store rejects the write or is unreachable
        """
        pass

    @abstractmethod
    async def update(self, record_id: str, properties: Properties) -> Record:
        """
        Overwrite the given properties on an existing record.

        Raises:
            RecordNotFoundError: If the record doesn't exist
            StoreUnavailableError: If the store rejects the write or is unreachable
        """
        pass

    @abstractmethod
    async def query(
        self,
        collection_id: str,
        filter: Optional[Filter] = None,
        sorts: Optional[List[Sort]] = None,
    ) -> List[Record]:
        """Return every record matching ``filter``, ordered by ``sorts``"""
        pass

    @abstractmethod
    async def get(self, record_id: str) -> Record:
        """
        Retrieve a record by id.

        Raises:
            RecordNotFoundError: If the record doesn't exist
        """
        pass
