# fba/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.

- 기본키 조회, 보조 키 조회(get_by_attribute), 상태별/정렬 목록, 페이지 목록을 제공합니다.
- 타임스탬프 정책: 생성 시 created_time 한 번, 변경 시마다 updated_time 갱신.
- del_flag 컬럼이 있는 모델은 소프트 삭제하며, 기본 조회에서 삭제된 행을 제외합니다.
- 고유 컬럼(unique_fields) 충돌은 AlreadyExists 로, 단건 미존재는 NotFound 로 복구합니다.
  쓰기 중 무결성 위반은 고유 컬럼을 다시 검사해 충돌한 값을 알려주고, 그 밖의 위반은
  DatabaseError 로 돌려줍니다.
  메시지는 하위 클래스가 already_exists / not_found 를 재정의해 플러그인 오류로 바꿉니다.
"""

from typing import Any, Dict, Generic, List, NoReturn, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete as sa_delete
from sqlalchemy import func, update as sa_update
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.exceptions import AlreadyExistsError, AppError, DatabaseError, NotFoundError, database_error_message
from fba.core.models import utc_now
from fba.core.pagination import PageParams

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    # 삽입/변경 전에 중복을 검사할 고유 컬럼 이름
    unique_fields: Tuple[str, ...] = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model

    # -------------------------------------------------------------------------
    # 정책 / 오류 훅
    # -------------------------------------------------------------------------
    @property
    def soft_delete(self) -> bool:
        return hasattr(self.model, "del_flag")

    @property
    def mutable(self) -> bool:
        return hasattr(self.model, "updated_time")

    def not_found(self, id: Any) -> AppError:
        return NotFoundError(f"{self.model.__tablename__} {id} 不存在")

    def already_exists(self, field: str, value: Any) -> AppError:
        return AlreadyExistsError(f"{field} {value} 已存在")

    # -------------------------------------------------------------------------
    # 쿼리 빌더
    # -------------------------------------------------------------------------
    def _alive(self, query):
        if self.soft_delete:
            query = query.where(self.model.del_flag == 0)
        return query

    def _where(self, query, filters: Optional[Dict[str, Any]], like_filters: Optional[Dict[str, Any]]):
        # 값이 None 인 필터는 '조건 없음'으로 취급합니다.
        for attribute, value in (filters or {}).items():
            if value is not None:
                query = query.where(getattr(self.model, attribute) == value)
        for attribute, value in (like_filters or {}).items():
            if value:
                query = query.where(getattr(self.model, attribute).ilike(f"%{value}%"))
        return query

    def _order(self, query, order_by: Optional[Sequence[str]]):
        # "-id" 는 내림차순, "sort" 는 오름차순
        for name in order_by or ("-id",):
            column = getattr(self.model, name.lstrip("-"))
            query = query.order_by(column.desc() if name.startswith("-") else column.asc())
        return query

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다. (소프트 삭제된 행 제외)"""
        query = self._alive(select(self.model).where(self.model.id == id))
        result = await db.execute(query)
        return result.scalars().first()

    async def get_or_404(self, db: AsyncSession, id: Any) -> ModelType:
        db_obj = await self.get(db, id)
        if db_obj is None:
            raise self.not_found(id)
        return db_obj

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any, include_deleted: bool = False
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        if not include_deleted:
            statement = self._alive(statement)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,
        like_filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """필터/정렬을 적용한 목록 (페이지 없음)."""
        query = self._where(self._alive(select(self.model)), filters, like_filters)
        query = self._order(query, order_by)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,
        like_filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        query = self._where(self._alive(select(func.count()).select_from(self.model)), filters, like_filters)
        result = await db.execute(query)
        return int(result.scalar_one())

    async def get_page(
        self,
        db: AsyncSession,
        *,
        params: PageParams,
        filters: Optional[Dict[str, Any]] = None,
        like_filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> Tuple[List[ModelType], int]:
        """같은 조건의 (페이지 항목, 전체 건수)를 돌려줍니다."""
        total = await self.count(db, filters=filters, like_filters=like_filters)
        items = await self.get_multi(
            db, filters=filters, like_filters=like_filters, order_by=order_by,
            skip=params.offset, limit=params.limit,
        )
        return items, total

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------
    async def _check_unique(self, db: AsyncSession, values: Dict[str, Any], exclude_id: Any = None) -> None:
        for field in self.unique_fields:
            value = values.get(field)
            if value is None:
                continue
            existing = await self.get_by_attribute(db, attribute=field, value=value, include_deleted=True)
            if existing is not None and existing.id != exclude_id:
                raise self.already_exists(field, value)

    async def _integrity_error(
        self, db: AsyncSession, exc: IntegrityError, values: Optional[Dict[str, Any]], exclude_id: Any
    ) -> NoReturn:
        await db.rollback()
        # 사전 검사와 쓰기 사이에 다른 요청이 같은 키를 넣은 경우
        if values:
            await self._check_unique(db, values, exclude_id)
        raise DatabaseError(database_error_message(exc)) from exc

    async def _flush(self, db: AsyncSession, values: Optional[Dict[str, Any]] = None) -> None:
        try:
            await db.flush()
        except IntegrityError as exc:
            await self._integrity_error(db, exc, values, None)

    async def _commit(
        self, db: AsyncSession, values: Optional[Dict[str, Any]] = None, exclude_id: Any = None
    ) -> None:
        """values 는 무결성 위반 시 다시 검사할 고유 컬럼 값입니다."""
        try:
            await db.commit()
        except IntegrityError as exc:
            await self._integrity_error(db, exc, values, exclude_id)

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, **extra: Any) -> ModelType:
        """
        새로운 레코드를 생성합니다. extra 는 DTO 에 없는 서버 측 값입니다.
        """
        data = obj_in.model_dump()
        data.update(extra)
        await self._check_unique(db, data)
        db_obj = self.model.model_validate(data)
        db_obj.id = None
        db_obj.created_time = utc_now()
        if self.mutable:
            db_obj.updated_time = None
        db.add(db_obj)
        await self._commit(db, data)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다. 보내지 않은 필드는 그대로 둡니다.
        """
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        update_data.pop("id", None)
        update_data.pop("created_time", None)
        # NOT NULL 컬럼에 명시적으로 보낸 null 은 '변경 없음'으로 취급합니다.
        columns = self.model.__table__.columns
        update_data = {
            key: value for key, value in update_data.items()
            if key in self.model.model_fields
            and (value is not None or (key in columns and columns[key].nullable))
        }
        await self._check_unique(db, update_data, exclude_id=db_obj.id)
        for key, value in update_data.items():
            setattr(db_obj, key, value)
        if self.mutable:
            db_obj.updated_time = utc_now()

        db.add(db_obj)
        await self._commit(db, update_data, exclude_id=db_obj.id)
        await db.refresh(db_obj)
        return db_obj

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        """
        기본키 목록을 삭제하고 영향받은 행 수를 돌려줍니다.
        이미 없는(또는 이미 삭제된) ID 는 무시되므로 반복 호출해도 안전합니다.
        """
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return 0
        if self.soft_delete:
            values: Dict[str, Any] = {"del_flag": 1}
            if self.mutable:
                values["updated_time"] = utc_now()
            statement = (
                sa_update(self.model)
                .where(self.model.id.in_(unique_ids), self.model.del_flag == 0)
                .values(**values)
            )
        else:
            statement = sa_delete(self.model).where(self.model.id.in_(unique_ids))
        result = await db.execute(statement)
        await db.commit()
        return result.rowcount or 0
