from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class IdProviderType(int, Enum):
    klasse = 1
    teacher = 2
    subject = 3
    room = 4
    student = 5


class IdProvider(BaseModel):
    """Reference to a single entity of the remote system"""
    model_config = ConfigDict(frozen=True)

    type: IdProviderType
    id: int

    @classmethod
    def from_type(cls, type: IdProviderType, id: int) -> "IdProvider":
        return cls(type=type, id=id)

    @classmethod
    def custom(cls, type: int, id: int) -> "IdProvider":
        """
        Build an identifier from a raw type code.
        1 = klasse, 2 = teacher, 3 = subject, 4 = room, 5 = student
        """
        if not 0 < type < 6:
            raise ValueError(f"Type code must be between 1 and 5, got {type}")

        return cls(type=IdProviderType(type), id=id)

    def __str__(self) -> str:
        return f"IdProvider<type:{self.type.name}, id:{self.id}>"


class Period(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None
    start_time: datetime | None
    end_time: datetime | None
    klassen_ids: list[IdProvider]
    teacher_ids: list[IdProvider]
    subject_ids: list[IdProvider]
    room_ids: list[IdProvider]
    is_cancelled: bool
    activity_type: str | None = None
    code: str | None = None
    lesson_type: str = "ls"
    lesson_text: str | None = None
    stat_flags: str | None = None


class Subject(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: IdProvider
    name: str | None = None
    long_name: str | None = None
    alternate_name: str | None = None
    fore_color: str | None = None
    back_color: str | None = None


class SchoolYear(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None
    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class Student(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: IdProvider
    key: str | None = None
    untis_name: str | None = None
    fore_name: str | None = None
    sur_name: str | None = None
    gender: str | None = None


class Room(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: IdProvider
    name: str | None = None
    long_name: str | None = None
    fore_color: str | None = None
    back_color: str | None = None


class Klasse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: IdProvider
    school_year_id: int
    name: str | None = None
    long_name: str | None = None
    fore_color: str | None = None
    back_color: str | None = None
    did: int | None = None
    teachers: list[IdProvider] = []


class DayTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)

    def __str__(self) -> str:
        return f"{self.hour:02}:{self.minute:02}"


# None means the upstream has no schedule for that day
DaySchedule = list[tuple[DayTime, DayTime]] | None


class TimeGrid(BaseModel):
    model_config = ConfigDict(frozen=True)

    monday: DaySchedule = None
    tuesday: DaySchedule = None
    wednesday: DaySchedule = None
    thursday: DaySchedule = None
    friday: DaySchedule = None
    saturday: DaySchedule = None
    sunday: DaySchedule = None

    @classmethod
    def from_sunday_first(cls, days: list[DaySchedule]) -> "TimeGrid":
        """Build from seven day schedules ordered the way the upstream numbers them (0 = sunday)"""
        if len(days) != 7:
            raise ValueError(f"Expected 7 days, got {len(days)}")

        return cls(
            monday=days[1],
            tuesday=days[2],
            wednesday=days[3],
            thursday=days[4],
            friday=days[5],
            saturday=days[6],
            sunday=days[0]
        )

    def as_list(self) -> list[DaySchedule]:
        return [self.monday, self.tuesday, self.wednesday, self.thursday, self.friday, self.saturday, self.sunday]


class SearchMatches(BaseModel):
    forename_matches: list[Student] | None = None
    surname_matches: list[Student] | None = None
