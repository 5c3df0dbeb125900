"""
Unit of Work - one database session and transaction shared by every repository

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; anything not committed is rolled back on exit
- Repositories are created per UoW and share its session
- Use cases receive a UoW factory so concurrent calls never share a session
"""

from __future__ import annotations

import abc
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError


if TYPE_CHECKING:
    from src.service.dining.app.interface.i_reservation_command_repo import (
        IReservationCommandRepo,
    )
    from src.service.dining.app.interface.i_reservation_query_repo import (
        IReservationQueryRepo,
    )
    from src.service.dining.app.interface.i_slot_override_repo import ISlotOverrideRepo
    from src.service.dining.app.interface.i_slot_repo import ISlotRepo
    from src.service.dining.app.interface.i_table_repo import ITableRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            rows = await uow.reservation_command_repo.create_many(reservations=...)
            await uow.commit()
    """

    slot_repo: ISlotRepo
    slot_override_repo: ISlotOverrideRepo
    table_repo: ITableRepo
    reservation_command_repo: IReservationCommandRepo
    reservation_query_repo: IReservationQueryRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self, *, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self._session_factory = session_factory
        self._session_cm: Optional[AbstractAsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.dining.driven_adapter.repo.reservation_command_repo_impl import (
            ReservationCommandRepoImpl,
        )
        from src.service.dining.driven_adapter.repo.reservation_query_repo_impl import (
            ReservationQueryRepoImpl,
        )
        from src.service.dining.driven_adapter.repo.slot_override_repo_impl import (
            SlotOverrideRepoImpl,
        )
        from src.service.dining.driven_adapter.repo.slot_repo_impl import SlotRepoImpl
        from src.service.dining.driven_adapter.repo.table_repo_impl import TableRepoImpl

        self._session_cm = self._session_factory()
        session = await self._session_cm.__aenter__()
        self.session = session

        self.slot_repo = SlotRepoImpl(session=session)
        self.slot_override_repo = SlotOverrideRepoImpl(session=session)
        self.table_repo = TableRepoImpl(session=session)
        self.reservation_command_repo = ReservationCommandRepoImpl(session=session)
        self.reservation_query_repo = ReservationQueryRepoImpl(session=session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_cm is not None:
                await self._session_cm.__aexit__(*args)
            self._session_cm = None
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError('Conflicting reservation, refresh availability and retry') from e

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
