from datetime import date, datetime

from webuntis_rpc.parser import (
    parse_klassen, parse_rooms, parse_school_year, parse_students, parse_subjects, parse_time_grid, parse_timetable
)
from webuntis_rpc.types import DayTime, IdProvider, IdProviderType

RAW_PERIOD = {
    "id": 125043,
    "date": 20240115,
    "startTime": 745,
    "endTime": 830,
    "kl": [{"id": 71}],
    "te": [{"id": 23}],
    "su": [{"id": 13}],
    "ro": [{"id": 1}, {"id": 2}],
    "activityType": "Unterricht",
    "lstext": "Bring calculator",
}


def test_period_fields():
    period = parse_timetable([RAW_PERIOD])[0]

    assert period.id == 125043
    assert period.start_time == datetime(2024, 1, 15, 7, 45)
    assert period.end_time == datetime(2024, 1, 15, 8, 30)
    assert period.klassen_ids == [IdProvider.custom(1, 71)]
    assert period.teacher_ids == [IdProvider.custom(2, 23)]
    assert period.subject_ids == [IdProvider.custom(3, 13)]
    assert period.room_ids == [IdProvider.custom(4, 1), IdProvider.custom(4, 2)]
    assert period.activity_type == "Unterricht"
    assert period.lesson_text == "Bring calculator"


def test_period_defaults_for_missing_keys():
    period = parse_timetable([{"id": 1, "date": 20240115, "startTime": 1300, "endTime": 1345}])[0]

    assert period.lesson_type == "ls"
    assert period.code is None
    assert period.is_cancelled is False
    assert period.klassen_ids == []
    assert period.stat_flags is None


def test_period_without_date_has_no_timestamps():
    period = parse_timetable([{"id": 1}])[0]
    assert period.start_time is None
    assert period.end_time is None


def test_only_exact_cancelled_code_cancels():
    codes = ["cancelled", "irregular", "Cancelled", None]
    periods = parse_timetable([dict(RAW_PERIOD, code=code) for code in codes])
    assert [p.is_cancelled for p in periods] == [True, False, False, False]


def test_lesson_type_is_kept():
    assert parse_timetable([dict(RAW_PERIOD, lstype="oh")])[0].lesson_type == "oh"


def test_subjects_are_subject_tagged():
    subject = parse_subjects([{"id": 13, "name": "M", "longName": "Mathematics", "foreColor": "000000"}])[0]

    assert subject.id.type is IdProviderType.subject
    assert subject.long_name == "Mathematics"
    assert subject.alternate_name is None
    assert subject.fore_color == "000000"


def test_school_year_dates():
    year = parse_school_year({"id": 10, "name": "2023/2024", "startDate": 20230911, "endDate": 20240712})

    assert year.name == "2023/2024"
    assert year.start_date == date(2023, 9, 11)
    assert year.end_date == date(2024, 7, 12)


def test_students_tolerate_missing_names():
    students = parse_students([
        {"id": 1, "key": "s1", "name": "DoeJ", "foreName": "John", "longName": "Doe", "gender": "male"},
        {"id": 2},
    ])

    assert students[0].fore_name == "John"
    assert students[0].sur_name == "Doe"
    assert students[0].untis_name == "DoeJ"
    assert students[1].id == IdProvider.custom(5, 2)
    assert students[1].fore_name is None


def test_records_without_id_are_skipped():
    assert parse_rooms([{"name": "R1"}, {"id": 4, "name": "R2"}])[0].name == "R2"


def test_klasse_collects_teacher_keys():
    klasse = parse_klassen([{
        "id": 71,
        "name": "1A",
        "longName": "Class 1A",
        "teacher1": 23,
        "teacher2": 24,
        "did": 3,
    }], school_year_id=10)[0]

    assert klasse.id == IdProvider.custom(1, 71)
    assert klasse.school_year_id == 10
    assert klasse.did == 3
    assert klasse.teachers == [IdProvider.custom(2, 23), IdProvider.custom(2, 24)]


def test_klasse_without_teachers():
    assert parse_klassen([{"id": 1}], school_year_id=10)[0].teachers == []


def test_time_grid_with_only_wednesday():
    grid = parse_time_grid([
        {"day": 3, "timeUnits": [
            {"name": "1", "startTime": 800, "endTime": 845},
            {"name": "2", "startTime": 850, "endTime": 935},
        ]},
    ])

    assert grid.wednesday == [
        (DayTime(hour=8, minute=0), DayTime(hour=8, minute=45)),
        (DayTime(hour=8, minute=50), DayTime(hour=9, minute=35)),
    ]
    others = [day for day in grid.as_list() if day is not grid.wednesday]
    assert len(others) == 6
    assert all(day is None for day in others)


def test_time_grid_sunday_is_last():
    grid = parse_time_grid([{"day": 0, "timeUnits": [{"startTime": 1000, "endTime": 1100}]}])
    assert grid.sunday == [(DayTime(hour=10, minute=0), DayTime(hour=11, minute=0))]
    assert grid.monday is None


def test_time_grid_day_without_units_is_empty_not_absent():
    grid = parse_time_grid([{"day": 1}])
    assert grid.monday == []
    assert grid.tuesday is None
