"""
Generic async CRUD shared by the concrete repositories.
Writes commit immediately; a failed write rolls back and re-raises.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from app.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

# Primary keys are INTEGER columns
MAX_ID = 2**31 - 1


def _valid_id(id: int) -> bool:
    return 1 <= id <= MAX_ID


class BaseRepository(Generic[ModelType]):
    """CRUD for one model class over one session."""

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def _name(self) -> str:
        return self.model.__name__

    async def _commit(self, action: str, db_obj: Optional[ModelType] = None) -> None:
        try:
            await self.db.commit()
            if db_obj is not None:
                await self.db.refresh(db_obj)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Could not {action} {self._name}: {e}")
            raise

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """Insert a row built from ``obj_in`` and return it refreshed."""
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        await self._commit("create", db_obj)
        logger.debug(f"{self._name} {db_obj.id} created")
        return db_obj

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """None for unknown ids, including ones no INTEGER key can hold."""
        if not _valid_id(id):
            return None
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Copy ``obj_in`` onto an already loaded row and persist it.

        Keys that are not model attributes are ignored.
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._commit("update", db_obj)
        logger.debug(f"{self._name} {db_obj.id} updated")
        return db_obj

    async def delete(self, id: int) -> bool:
        """
        Delete by primary key; False when nothing matched.

        Child rows go with it through ON DELETE CASCADE.
        """
        if not _valid_id(id):
            return False
        try:
            result = await self.db.execute(delete(self.model).where(self.model.id == id))
        except Exception:
            await self.db.rollback()
            raise
        await self._commit("delete")

        if result.rowcount:
            logger.debug(f"{self._name} {id} deleted")
        return result.rowcount > 0

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = select(func.count(self.model.id))
        for field, value in (filters or {}).items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def exists(self, id: int) -> bool:
        if not _valid_id(id):
            return False
        return await self.count({"id": id}) > 0

    async def get_many_by_ids(self, ids: List[int]) -> Dict[int, ModelType]:
        """Fetch records keyed by primary key."""
        if not ids:
            return {}
        result = await self.db.execute(select(self.model).where(self.model.id.in_(set(ids))))
        return {obj.id: obj for obj in result.scalars().all()}
