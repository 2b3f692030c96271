from datetime import date, datetime
from typing import Any
import logging
import os

from .cache import ResponseCache
from .config import DEFAULT_USER_AGENT, SessionConfig, load_config
from .errors import UntisError
from .matching import best_matches
from .parser import (
    parse_klassen, parse_rooms, parse_school_year, parse_school_years, parse_students, parse_subjects,
    parse_time_grid, parse_timetable
)
from .rpc import DEFAULT_PATH, RpcClient
from .transport import AiohttpTransport, Transport
from .types import (
    IdProvider, IdProviderType, Klasse, Period, Room, SchoolYear, SearchMatches, Student, Subject, TimeGrid
)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class Session:
    """
    Asynchronous client for the WebUntis JSON-RPC API.\n
    Create with `await Session.init(...)` to be logged in right away, or `Session.init_no_login(...)`
    """

    def __init__(
        self,
        server: str,
        school: str,
        username: str,
        password: str,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Transport | None = None,
        path: str = DEFAULT_PATH
    ):
        self._logger = logging.getLogger(__name__)
        self.server = server
        self.school = school
        self.username = username
        self._password = password
        self.user_agent = user_agent

        self.user_id: IdProvider | None = None
        self.user_klasse_id: IdProvider | None = None

        self._rpc = RpcClient(server, school, transport or AiohttpTransport(), path=path, cache=ResponseCache())

    @classmethod
    async def init(cls, server: str, school: str, username: str, password: str, **kwargs) -> "Session":
        session = cls(server, school, username, password, **kwargs)
        await session._login_or_close()
        return session

    @classmethod
    def init_no_login(cls, server: str, school: str, username: str, password: str, **kwargs) -> "Session":
        return cls(server, school, username, password, **kwargs)

    @classmethod
    async def from_config(cls, path: str | os.PathLike | SessionConfig, login: bool = True,
                          transport: Transport | None = None) -> "Session":
        config = path if isinstance(path, SessionConfig) else load_config(path)
        session = cls(
            config.server,
            config.school,
            config.username,
            config.password,
            user_agent=config.user_agent,
            transport=transport,
            path=config.path
        )
        session.cache_length_maximum = config.cache_length_maximum
        session.cache_dispose_time = config.cache_dispose_time
        if login:
            await session._login_or_close()
        return session

    async def _login_or_close(self):
        # Nobody else holds this session yet, so a failed login must release the transport here
        try:
            await self.login()
        except BaseException:
            await self.close()
            raise

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def session_id(self) -> str | None:
        return self._rpc.session_id

    @property
    def cache_length_maximum(self) -> int:
        return self._rpc.cache.length_maximum

    @cache_length_maximum.setter
    def cache_length_maximum(self, value: int):
        self._rpc.cache.length_maximum = value

    @property
    def cache_dispose_time(self) -> float:
        """Minutes a cached response stays valid"""
        return self._rpc.cache.dispose_time

    @cache_dispose_time.setter
    def cache_dispose_time(self, value: float):
        self._rpc.cache.dispose_time = value

    async def login(self):
        result = await self._rpc.call("authenticate", {
            "user": self.username,
            "password": self._password,
            "client": self.user_agent
        })
        self._rpc.session_id = result["sessionId"]

        if "personId" in result and "personType" in result:
            person_type = result["personType"]
            if person_type in [t.value for t in IdProviderType]:
                self.user_id = IdProvider.custom(person_type, result["personId"])
            else:
                self._logger.warning(f"Ignoring unknown person type {person_type!r} in login response")
        if "klasseId" in result:
            self.user_klasse_id = IdProvider.from_type(IdProviderType.klasse, result["klasseId"])

        self._logger.info(f"Logged in to {self.server} as {self.username}")

    async def quit(self):
        await self._rpc.call("logout")
        self.user_id = None
        self.user_klasse_id = None
        self._logger.info(f"Logged out of {self.server}")

    async def logout(self):
        await self.quit()

    async def close(self):
        await self._rpc.transport.close()

    def clear_cache(self):
        self._rpc.cache.clear()

    async def get_timetable(
        self,
        id_provider: IdProvider,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
        use_cache: bool = False
    ) -> list[Period]:
        start_date = _as_date(start_date or date.today())
        end_date = _as_date(end_date or start_date)
        if start_date > end_date:
            raise ValueError("start_date must be equal to or before the end_date.")

        raw = await self._rpc.call("getTimetable", {
            "id": id_provider.id,
            "type": id_provider.type.value,
            "startDate": start_date.strftime("%Y%m%d"),
            "endDate": end_date.strftime("%Y%m%d")
        }, use_cache=use_cache)
        return parse_timetable(raw)

    async def get_cancellations(
        self,
        id_provider: IdProvider,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
        use_cache: bool = False
    ) -> list[Period]:
        timetable = await self.get_timetable(id_provider, start_date, end_date, use_cache=use_cache)
        return [period for period in timetable if period.is_cancelled]

    async def get_subjects(self, use_cache: bool = True) -> list[Subject]:
        return parse_subjects(await self._rpc.call("getSubjects", use_cache=use_cache))

    async def get_time_grid(self, use_cache: bool = True) -> TimeGrid:
        return parse_time_grid(await self._rpc.call("getTimegridUnits", use_cache=use_cache))

    async def get_current_school_year(self, use_cache: bool = False) -> SchoolYear:
        return parse_school_year(await self._rpc.call("getCurrentSchoolyear", use_cache=use_cache) or {})

    async def get_school_years(self, use_cache: bool = False) -> list[SchoolYear]:
        return parse_school_years(await self._rpc.call("getSchoolyears", use_cache=use_cache))

    async def get_students(self, use_cache: bool = True) -> list[Student]:
        return parse_students(await self._rpc.call("getStudents", use_cache=use_cache))

    async def get_rooms(self, use_cache: bool = True) -> list[Room]:
        return parse_rooms(await self._rpc.call("getRooms", use_cache=use_cache))

    async def get_klassen(self, school_year_id: int, use_cache: bool = True) -> list[Klasse]:
        raw = await self._rpc.call("getKlassen", {"schoolyearId": school_year_id}, use_cache=use_cache)
        return parse_klassen(raw, school_year_id)

    async def search_person(self, forename: str, surname: str, is_teacher: bool,
                            birth_date: str = "0") -> IdProvider | None:
        type = IdProviderType.teacher if is_teacher else IdProviderType.student
        person_id = await self._rpc.call("getPersonId", {
            "type": type.value,
            "sn": surname,
            "fn": forename,
            "dob": birth_date
        })
        if not person_id:
            return None
        return IdProvider.from_type(type, person_id)

    async def search_student(
        self,
        forename: str | None = None,
        surname: str | None = None,
        max_match_count: int = 5,
        min_match_rating: float = 0.4
    ) -> SearchMatches | None:
        if not 0 <= min_match_rating <= 1:
            raise ValueError(f"min_match_rating must be between 0 and 1, got {min_match_rating}")
        if max_match_count <= 0:
            raise ValueError(f"max_match_count must be positive, got {max_match_count}")

        if forename is None and surname is None:
            return None

        try:
            students = await self.get_students()
        except UntisError as e:
            self._logger.warning(f"Student search failed, could not fetch students: {e}")
            return None

        # Forename wins when both are given
        if forename is not None:
            matches = best_matches(forename, students, lambda s: s.fore_name, max_match_count, min_match_rating)
            return SearchMatches(forename_matches=matches)

        matches = best_matches(surname, students, lambda s: s.sur_name, max_match_count, min_match_rating)
        return SearchMatches(surname_matches=matches)

    async def custom_request(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Post a raw request, the decoded result is returned as is. USE WITH CAUTION"""
        return await self._rpc.call(method, params or {})
