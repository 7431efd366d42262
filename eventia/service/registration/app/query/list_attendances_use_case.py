from collections import Counter
from typing import List, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventia.platform.config.core_setting import Settings
from eventia.platform.config.di import Container
from eventia.platform.logging.loguru_io import Logger
from eventia.service.registration.app.cache_aside import CacheAside
from eventia.service.registration.app.cache_keys import event_attendances_key
from eventia.service.registration.app.entity_codec import (
    decode_attendance,
    encode_list,
    list_decoder,
)
from eventia.service.registration.app.interface.i_attendance_repo import IAttendanceRepo
from eventia.service.registration.domain.entity.attendance_entity import AttendanceEntity
from eventia.service.registration.domain.enum.attendance_status import AttendanceStatus


@attrs.frozen
class AttendanceStatistics:
    total_registered: int
    confirmed: int
    cancelled: int
    attended: int
    active: int


class ListAttendancesUseCase:
    def __init__(
        self, *, attendance_repo: IAttendanceRepo, cache_aside: CacheAside, settings: Settings
    ) -> None:
        self.attendance_repo = attendance_repo
        self.cache_aside = cache_aside
        self.settings = settings

    @classmethod
    @inject
    def depends(
        cls,
        attendance_repo: IAttendanceRepo = Depends(Provide[Container.attendance_repo]),
        cache_aside: CacheAside = Depends(Provide[Container.cache_aside]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(attendance_repo=attendance_repo, cache_aside=cache_aside, settings=settings)

    @Logger.io
    async def list_by_event(self, *, event_id: UUID) -> List[AttendanceEntity]:
        attendances = await self.cache_aside.get_or_load(
            key=event_attendances_key(event_id),
            loader=lambda: self.attendance_repo.list_by_event(event_id=event_id),
            ttl=self.settings.CACHE_TTL_ATTENDANCES,
            encode=encode_list,
            decode=list_decoder(decode_attendance),
        )
        return attendances or []

    @Logger.io
    async def list_by_participant(self, *, participant_id: UUID) -> List[AttendanceEntity]:
        return await self.attendance_repo.list_by_participant(participant_id=participant_id)

    @Logger.io
    async def statistics(self, *, event_id: UUID) -> AttendanceStatistics:
        attendances = await self.list_by_event(event_id=event_id)
        by_status = Counter(a.status for a in attendances)
        return AttendanceStatistics(
            total_registered=len(attendances),
            confirmed=by_status[AttendanceStatus.CONFIRMED],
            cancelled=by_status[AttendanceStatus.CANCELLED],
            attended=by_status[AttendanceStatus.ATTENDED],
            active=sum(1 for a in attendances if a.is_active),
        )
