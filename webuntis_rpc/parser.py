# Copyright (c) 2024, Kemran @remr2005
# Copyright (c) 2024, Alexander Baransky <alexander.baranskiy@yandex.ru>

from datetime import date, datetime, time
from typing import Any, Union
import logging

from .types import (
    DayTime, DaySchedule, IdProvider, IdProviderType, Klasse, Period, Room, SchoolYear, Student, Subject, TimeGrid
)

logger = logging.getLogger(__name__)

# Decoded JSON as it comes from the wire
RawValue = Union[None, bool, int, float, str, list["RawValue"], dict[str, "RawValue"]]
RawRecord = dict[str, RawValue]

TEACHER_KEY_PREFIX = "teacher"
PERIOD_ID_LISTS = {
    "kl": IdProviderType.klasse,
    "te": IdProviderType.teacher,
    "su": IdProviderType.subject,
    "ro": IdProviderType.room
}


def get_str(record: RawRecord, key: str) -> str | None:
    value = record.get(key)
    return value if isinstance(value, str) else None


def get_int(record: RawRecord, key: str) -> int | None:
    value = record.get(key)
    # bool is an int subclass, upstream never means a number with it
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_list(record: RawRecord, key: str) -> list[RawValue]:
    value = record.get(key)
    return value if isinstance(value, list) else []


def records(raw: Any) -> list[RawRecord]:
    """Keep only the mapping entries of a raw list"""
    if not isinstance(raw, list):
        return []

    out = []
    for item in raw:
        if isinstance(item, dict):
            out.append(item)
        else:
            logger.warning(f"Skipping non-record item {item!r}")
    return out


def parse_hhmm(value: RawValue) -> tuple[int, int] | None:
    """800 -> (8, 0), 1345 -> (13, 45)"""
    if value is None:
        return None

    digits = str(value).zfill(4)
    if len(digits) != 4 or not digits.isdigit():
        return None
    return int(digits[:2]), int(digits[2:])


def parse_yyyymmdd(value: RawValue) -> date | None:
    if value is None:
        return None

    try:
        return datetime.strptime(str(value), "%Y%m%d").date()
    except ValueError:
        logger.warning(f"Invalid date {value!r}")
        return None


def parse_timestamp(raw_date: RawValue, raw_time: RawValue) -> datetime | None:
    parsed_day, parsed_time = parse_yyyymmdd(raw_date), parse_hhmm(raw_time)
    if parsed_day is None or parsed_time is None:
        return None

    return datetime.combine(parsed_day, time(*parsed_time))


def parse_id_list(raw: list[RawValue], type: IdProviderType) -> list[IdProvider]:
    ids = []
    for item in raw:
        if isinstance(item, dict) and (id := get_int(item, "id")) is not None:
            ids.append(IdProvider.from_type(type, id))
    return ids


def parse_period(raw: RawRecord) -> Period:
    code = get_str(raw, "code")
    return Period(
        id=get_int(raw, "id"),
        start_time=parse_timestamp(raw.get("date"), raw.get("startTime")),
        end_time=parse_timestamp(raw.get("date"), raw.get("endTime")),
        klassen_ids=parse_id_list(get_list(raw, "kl"), PERIOD_ID_LISTS["kl"]),
        teacher_ids=parse_id_list(get_list(raw, "te"), PERIOD_ID_LISTS["te"]),
        subject_ids=parse_id_list(get_list(raw, "su"), PERIOD_ID_LISTS["su"]),
        room_ids=parse_id_list(get_list(raw, "ro"), PERIOD_ID_LISTS["ro"]),
        is_cancelled=code == "cancelled",
        activity_type=get_str(raw, "activityType"),
        code=code,
        lesson_type=get_str(raw, "lstype") or "ls",
        lesson_text=get_str(raw, "lstext"),
        stat_flags=get_str(raw, "statflags")
    )


def parse_timetable(raw: Any) -> list[Period]:
    return [parse_period(period) for period in records(raw)]


def parse_subjects(raw: Any) -> list[Subject]:
    subjects = []
    for subject in records(raw):
        if (id := get_int(subject, "id")) is None:
            logger.warning(f"Skipping subject without id: {subject}")
            continue

        subjects.append(Subject(
            id=IdProvider.from_type(IdProviderType.subject, id),
            name=get_str(subject, "name"),
            long_name=get_str(subject, "longName"),
            alternate_name=get_str(subject, "alternateName"),
            fore_color=get_str(subject, "foreColor"),
            back_color=get_str(subject, "backColor")
        ))
    return subjects


def parse_school_year(raw: RawRecord) -> SchoolYear:
    return SchoolYear(
        id=get_int(raw, "id"),
        name=get_str(raw, "name"),
        start_date=parse_yyyymmdd(raw.get("startDate")),
        end_date=parse_yyyymmdd(raw.get("endDate"))
    )


def parse_school_years(raw: Any) -> list[SchoolYear]:
    return [parse_school_year(year) for year in records(raw)]


def parse_students(raw: Any) -> list[Student]:
    students = []
    for student in records(raw):
        if (id := get_int(student, "id")) is None:
            logger.warning(f"Skipping student without id: {student}")
            continue

        students.append(Student(
            id=IdProvider.from_type(IdProviderType.student, id),
            key=get_str(student, "key"),
            untis_name=get_str(student, "name"),
            fore_name=get_str(student, "foreName"),
            sur_name=get_str(student, "longName"),
            gender=get_str(student, "gender")
        ))
    return students


def parse_rooms(raw: Any) -> list[Room]:
    rooms = []
    for room in records(raw):
        if (id := get_int(room, "id")) is None:
            logger.warning(f"Skipping room without id: {room}")
            continue

        rooms.append(Room(
            id=IdProvider.from_type(IdProviderType.room, id),
            name=get_str(room, "name"),
            long_name=get_str(room, "longName"),
            fore_color=get_str(room, "foreColor"),
            back_color=get_str(room, "backColor")
        ))
    return rooms


def parse_klasse_teachers(raw: RawRecord) -> list[IdProvider]:
    """
    Upstream spreads the class teachers over keys teacher1, teacher2, ...\n
    so every key with the teacher prefix is collected in record order
    """
    teachers = []
    for key, value in raw.items():
        if not key.startswith(TEACHER_KEY_PREFIX):
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        teachers.append(IdProvider.from_type(IdProviderType.teacher, value))
    return teachers


def parse_klassen(raw: Any, school_year_id: int) -> list[Klasse]:
    klassen = []
    for klasse in records(raw):
        if (id := get_int(klasse, "id")) is None:
            logger.warning(f"Skipping klasse without id: {klasse}")
            continue

        klassen.append(Klasse(
            id=IdProvider.from_type(IdProviderType.klasse, id),
            school_year_id=school_year_id,
            name=get_str(klasse, "name"),
            long_name=get_str(klasse, "longName"),
            fore_color=get_str(klasse, "foreColor"),
            back_color=get_str(klasse, "backColor"),
            did=get_int(klasse, "did"),
            teachers=parse_klasse_teachers(klasse)
        ))
    return klassen


def parse_day_time(value: RawValue) -> DayTime | None:
    if (parsed := parse_hhmm(value)) is None:
        return None
    return DayTime(hour=parsed[0], minute=parsed[1])


def parse_time_units(raw: list[RawValue]) -> list[tuple[DayTime, DayTime]]:
    units = []
    for unit in raw:
        if not isinstance(unit, dict):
            continue

        start, end = parse_day_time(unit.get("startTime")), parse_day_time(unit.get("endTime"))
        if start is None or end is None:
            logger.warning(f"Skipping time unit without start/end: {unit}")
            continue
        units.append((start, end))
    return units


def parse_time_grid(raw: Any) -> TimeGrid:
    """Upstream numbers days 0 = sunday .. 6 = saturday and lists only days that have units"""
    by_day: dict[int, RawRecord] = {}
    for day in records(raw):
        if (index := get_int(day, "day")) is not None and index not in by_day:
            by_day[index] = day

    days: list[DaySchedule] = []
    for index in range(7):
        day = by_day.get(index)
        days.append(parse_time_units(get_list(day, "timeUnits")) if day is not None else None)

    return TimeGrid.from_sunday_first(days)
