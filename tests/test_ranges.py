from datetime import datetime

from assetKeeper.domain.models import DateRange, FileSizeRange

MIB = 1024 * 1024


def test_disabled_ranges_match_everything():
    assert DateRange.disabled().contains(datetime(1900, 1, 1))
    assert FileSizeRange.disabled().contains(10 ** 15)


def test_enabled_range_bounds_are_inclusive():
    window = DateRange(datetime(2024, 1, 1), datetime(2024, 1, 31))

    assert window.contains(datetime(2024, 1, 1))
    assert window.contains(datetime(2024, 1, 31))
    assert not window.contains(datetime(2024, 2, 1))

    sizes = FileSizeRange.custom(10, 20)
    assert sizes.contains(10) and sizes.contains(20)
    assert not sizes.contains(21)


def test_inverted_range_is_disabled():
    assert not DateRange(datetime(2024, 2, 1), datetime(2024, 1, 1)).enabled
    assert not FileSizeRange(100, 1).enabled


def test_calendar_windows():
    now = datetime(2024, 5, 15, 13, 30)  # a Wednesday

    today = DateRange.today(now)
    week = DateRange.this_week(now)
    month = DateRange.this_month(now)
    year = DateRange.this_year(now)

    assert today.start == datetime(2024, 5, 15)
    assert today.contains(datetime(2024, 5, 15, 23, 59, 59))
    assert week.start == datetime(2024, 5, 12)
    assert not week.contains(datetime(2024, 5, 19))
    assert month.start == datetime(2024, 5, 1)
    assert month.contains(datetime(2024, 5, 31, 23, 59))
    assert not month.contains(datetime(2024, 6, 1))
    assert year.start == datetime(2024, 1, 1)
    assert year.contains(datetime(2024, 12, 31, 23, 59))


def test_week_starting_on_sunday():
    sunday = datetime(2024, 5, 12, 8, 0)

    assert DateRange.this_week(sunday).start == datetime(2024, 5, 12)


def test_relative_windows():
    now = datetime(2024, 3, 31, 12, 0)

    assert DateRange.last_days(7, now).start == datetime(2024, 3, 24, 12, 0)
    assert DateRange.last_months(1, now).start == datetime(2024, 2, 29, 12, 0)
    assert DateRange.last_years(1, now).start == datetime(2023, 3, 31, 12, 0)


def test_size_presets_do_not_overlap():
    presets = [FileSizeRange.small(), FileSizeRange.medium(), FileSizeRange.large(), FileSizeRange.very_large()]

    for size in (0, MIB - 1, MIB, 10 * MIB - 1, 10 * MIB, 100 * MIB - 1, 100 * MIB):
        assert sum(p.contains(size) for p in presets) == 1


def test_size_helpers():
    assert FileSizeRange.custom_kb(1, 2) == FileSizeRange(1024, 2048)
    assert FileSizeRange.custom_mb(1, 2) == FileSizeRange(MIB, 2 * MIB)
    assert FileSizeRange.up_to(10).contains(0)
    assert not FileSizeRange.at_least(10).contains(9)
