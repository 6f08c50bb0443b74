# -*- coding: utf-8 -*-
"""
ipn_listener/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Las tablas de IPN son append-only: el repositorio base no expone
update ni delete.

Los valores de texto llegan de un tercero no confiable: clip_to_columns
los recorta al largo de su columna String(n) para que un valor largo no
haga fallar el INSERT en motores estrictos (PostgreSQL).

Autor: DoxAI
Fecha: 2026-10-19
"""

from typing import Any, Dict, Generic, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para inserción y lectura."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # Lectura
    # -------------------------------------------------------------
    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def list(self, session: AsyncSession) -> Sequence[T]:
        result = await session.execute(select(self.model))
        return result.scalars().all()

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())

    # -------------------------------------------------------------
    # Inserción (ORM => sentencias parametrizadas)
    # -------------------------------------------------------------
    def clip_to_columns(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        columns = self.model.__table__.columns
        clipped: Dict[str, Any] = {}
        for name, value in fields.items():
            length = getattr(columns[name].type, "length", None) if name in columns else None
            if isinstance(value, str) and length and len(value) > length:
                value = value[:length]
            clipped[name] = value
        return clipped

    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

# Fin del archivo ipn_listener/shared/database/repository.py
