'''
**svcutils.dates**
---------------

A small naive (local time) date-time value object that understands the
handful of textual formats our services exchange, including the Russian
"26 октября 2022" long form, plus the interval helpers built on top of it.

Supported input formats:

- ``2022-10-26T13:23:52``
- ``26-10-2022T13:23:52``
- ``2022-10-26 13:23:52``
- ``2022-10-26 13:23:52.412``
- ``26.10.2022``
- ``26-10-2022``
- ``26 ноября 2022``
- ``20240618``
- ``13:23:52`` (today at that time)
'''
import dataclasses as dc
import datetime as dt
import enum
import logging
import math
from collections.abc import Sequence
from typing import Self

from dateutil.relativedelta import relativedelta

from svcutils.errors import DateParseError

logger = logging.getLogger(__name__)

FORMAT_SERIALIZE_DATE_TIME = '%Y-%m-%dT%H:%M:%S'
FORMAT_SERIALIZE_DATE_TIME_REVERSE = '%d-%m-%YT%H:%M:%S'
FORMAT_SERIALIZE_MSSQL = '%Y-%m-%d %H:%M:%S.%f'
FORMAT_SERIALIZE_DATE_TIME_WS = '%Y-%m-%d %H:%M:%S'
FORMAT_DOT_DATE = '%d.%m.%Y'
FORMAT_DASH_DATE = '%d-%m-%Y'
FORMAT_FULL_DATE = '%d %m %Y'
FORMAT_JOIN_DATE = '%Y%m%d'
FORMAT_TIME = '%H:%M:%S'

SUPPORTED_FORMATS = ', '.join((
    FORMAT_JOIN_DATE,
    FORMAT_DOT_DATE,
    FORMAT_SERIALIZE_DATE_TIME,
    FORMAT_SERIALIZE_DATE_TIME_REVERSE,
    FORMAT_SERIALIZE_DATE_TIME_WS,
    FORMAT_TIME,
    FORMAT_SERIALIZE_MSSQL,
))

# genitive month names, index 0 is January
LOCALE_MONTHS = (
    'января', 'февраля', 'марта', 'апреля', 'мая', 'июня',
    'июля', 'августа', 'сентября', 'октября', 'ноября', 'декабря',
)

_DATE_TIME_FORMATS = (
    FORMAT_SERIALIZE_DATE_TIME,
    FORMAT_SERIALIZE_DATE_TIME_REVERSE,
    FORMAT_SERIALIZE_DATE_TIME_WS,
    FORMAT_SERIALIZE_MSSQL,
    FORMAT_DOT_DATE,
    FORMAT_DASH_DATE,
)

SECONDS_PER_DAY = 86400


class DateFormat(enum.Enum):
    SERIALIZE = 'serialize'                  # 2022-10-26T13:23:52
    SERIALIZE_REVERSE = 'serialize_reverse'  # 26-10-2022T13:23:52
    ONLY_DATE = 'only_date'                  # 26-10-2022
    DOT_DATE = 'dot_date'                    # 26.10.2022
    FULL_DATE = 'full_date'                  # 26 октября 2022
    JOIN_DATE = 'join_date'                  # 20240618
    MSSQL_DATE = 'mssql_date'                # 2025-03-11 15:51:21.452
    TIME = 'time'                            # 12:00:00


_STRFTIME = {
    DateFormat.SERIALIZE: FORMAT_SERIALIZE_DATE_TIME,
    DateFormat.SERIALIZE_REVERSE: FORMAT_SERIALIZE_DATE_TIME_REVERSE,
    DateFormat.ONLY_DATE: FORMAT_DASH_DATE,
    DateFormat.DOT_DATE: FORMAT_DOT_DATE,
    DateFormat.JOIN_DATE: FORMAT_JOIN_DATE,
    DateFormat.TIME: FORMAT_TIME,
}


def _locale_months_to_num(value: str) -> str:
    for number, name in enumerate(LOCALE_MONTHS, start=1):
        value = value.replace(name, str(number))
    return value


def _today_at(time: dt.time) -> dt.datetime:
    return dt.datetime.combine(dt.date.today(), time)


@dc.dataclass(slots=True)
class Diff:
    '''
    The span between two dates, as shown by progress bars.
    '''
    days: float = 0.0
    '''days between the start and the end date'''
    days_left: float = 0.0
    '''days from now until the end date'''
    progress: int = 100
    '''elapsed share of the span in percent (0-100)'''

    def to_json(self) -> dict:
        return {
            'days': self.days,
            'daysLeft': self.days_left,
            'progress': self.progress,
        }


class Date:
    '''
    Wraps a naive `datetime.datetime`.

    Two dates are *equal* when they fall on the same calendar day, while
    ordering compares the full date-time. Hashing follows equality.
    '''
    __slots__ = ('_value',)

    def __init__(self, value: dt.datetime) -> None:
        self._value: dt.datetime = value

    @classmethod
    def parse(cls, value: str) -> Self | None:
        '''
        Parse ``value`` with the first supported format that fits.

        Returns
        -------
        Date | None
            None when no format matches (the failure is logged)
        '''
        for fmt in _DATE_TIME_FORMATS:
            try:
                return cls(dt.datetime.strptime(value, fmt))
            except ValueError:
                continue

        try:
            return cls(dt.datetime.strptime(_locale_months_to_num(value), FORMAT_FULL_DATE))
        except ValueError:
            pass

        try:
            return cls(dt.datetime.strptime(value, FORMAT_JOIN_DATE))
        except ValueError:
            pass

        try:
            return cls(_today_at(dt.datetime.strptime(value, FORMAT_TIME).time()))
        except ValueError:
            pass

        logger.error(f'Unsupported date format - {value}. Supported formats: {SUPPORTED_FORMATS}')
        return None

    @classmethod
    def from_str(cls, value: str) -> Self:
        '''
        Like `parse` but raises.

        Raises
        ------
        DateParseError
        '''
        parsed = cls.parse(value)
        if parsed is None:
            raise DateParseError(value, SUPPORTED_FORMATS)
        return parsed

    @classmethod
    def now(cls) -> Self:
        return cls(dt.datetime.now().replace(microsecond=0))

    @classmethod
    def new_time(cls, hour: int, minute: int, second: int) -> Self:
        return cls(_today_at(dt.time(hour, minute, second)))

    @classmethod
    def new_date(cls, day: int, month: int, year: int) -> Self:
        return cls(dt.datetime(year, month, day))

    @classmethod
    def from_system_time(cls, timestamp: float) -> Self:
        '''
        Local date-time of a POSIX timestamp (e.g. `os.stat` mtime).
        '''
        return cls(dt.datetime.fromtimestamp(timestamp))

    @property
    def value(self) -> dt.datetime:
        return self._value

    def format(self, fmt: DateFormat = DateFormat.SERIALIZE) -> str:
        value = self._value
        if fmt is DateFormat.MSSQL_DATE:
            return f'{value:%Y-%m-%d %H:%M:%S}.{value.microsecond // 1000:03d}'
        if fmt is DateFormat.FULL_DATE:
            return f'{value.day:02} {LOCALE_MONTHS[value.month - 1]} {value.year}'
        return value.strftime(_STRFTIME[fmt])

    def to_json(self) -> str:
        return self.format(DateFormat.SERIALIZE)

    def add_minutes(self, minutes: int) -> Self:
        return type(self)(self._value + dt.timedelta(minutes=minutes))

    def sub_minutes(self, minutes: int) -> Self:
        return type(self)(self._value - dt.timedelta(minutes=minutes))

    def add_seconds(self, seconds: int) -> Self:
        return type(self)(self._value + dt.timedelta(seconds=seconds))

    def add_months(self, months: int) -> Self | None:
        '''
        Shift by whole months, clamping the day to the end of the target
        month (31 Jan + 1 month = 28/29 Feb).

        Returns
        -------
        Date | None
            None when the result falls outside the supported range
        '''
        try:
            return type(self)(self._value + relativedelta(months=months))
        except (OverflowError, ValueError):
            return None

    def with_time(self, other: 'Date') -> Self:
        '''
        This calendar day at the hour and minute of ``other``.
        '''
        time = other.value.time()
        return type(self).new_date(
            self._value.day, self._value.month, self._value.year
        ).add_minutes(time.hour * 60 + time.minute)

    def end_of_day(self) -> Self:
        '''
        ``23:59:59`` of this day if the time is exactly midnight,
        otherwise unchanged.
        '''
        if self._value.time() == dt.time(0, 0, 0):
            return type(self)(self._value.replace(hour=23, minute=59, second=59))
        return self

    def time_in_hour(self, hour: int) -> bool:
        return self._value.hour == hour

    def is_today(self) -> bool:
        return self._value.date() == dt.date.today()

    def is_weekend(self) -> bool:
        return self._value.weekday() >= 5

    def date_is_equal(self, other: 'Date') -> bool:
        return self._value.date() == other.value.date()

    def time_is_equal(self, other: 'Date') -> bool:
        return self._value.time() == other.value.time()

    def diff(self, end_date: 'Date') -> Diff:
        '''
        Days between this date and ``end_date`` (a midnight end date counts
        the whole day), the days left from now, and the elapsed share.

        Returns
        -------
        Diff
        '''
        end = end_date.end_of_day()
        now = type(self).now()

        days = max(0, end - self) / SECONDS_PER_DAY
        days_left = max(0, end - now) / SECONDS_PER_DAY

        if days == 0:
            progress = 100
        else:
            progress = math.floor(100.0 - (days_left / days) * 100.0)

        result = Diff(days=round(days, 2), days_left=round(days_left, 2), progress=progress)
        logger.info(f'{result.days} {result.days_left}, {result.progress}%')
        return result

    @staticmethod
    def in_range(
        source: tuple['Date', 'Date'],
        ranges: Sequence[tuple['Date', 'Date']],
    ) -> 'IncludeDates | None':
        '''
        The first of ``ranges`` that overlaps the ``source`` interval.

        Returns
        -------
        IncludeDates | None
        '''
        start, end = source[0].value, source[1].value
        for range_from, range_to in ranges:
            before = start < range_from.value and end < range_from.value
            after = start > range_to.value and end > range_to.value
            if not (before or after):
                return IncludeDates(
                    range_from=range_from,
                    range_to=range_to,
                    source_from=source[0],
                    source_to=source[1],
                )
        return None

    @staticmethod
    def time_in_range(
        source: 'Date',
        time_from: tuple[int, int, int],
        time_to: tuple[int, int, int],
    ) -> bool:
        '''
        Whether the time of day of ``source`` lies strictly between
        ``time_from`` and ``time_to`` (``(h, m, s)`` tuples). A range whose
        start hour is after its end hour wraps around midnight.
        '''
        current = source.value.time()
        start, stop = dt.time(*time_from), dt.time(*time_to)

        if time_from[0] > time_to[0]:
            return (
                start < current < dt.time(23, 59, 59)
                or dt.time(0, 0, 0) < current < stop
            )
        return start < current < stop

    @staticmethod
    def exclude(items: list['Date'], to_remove: Sequence['Date'], compare: DateFormat) -> None:
        '''
        Drop, in place, every date of ``items`` whose ``compare`` rendering
        matches one of ``to_remove``.
        '''
        keys = {date.format(compare) for date in to_remove}
        items[:] = [date for date in items if date.format(compare) not in keys]

    @staticmethod
    def union(items: list['Date'], added: Sequence['Date'], compare: DateFormat) -> None:
        '''
        Replace, in place, the dates of ``items`` matching ``added`` (by their
        ``compare`` rendering) and append all of ``added``.
        '''
        Date.exclude(items, added, compare)
        items.extend(added)

    def __sub__(self, other: 'Date') -> int:
        if not isinstance(other, Date):
            return NotImplemented
        return int((self._value - other.value).total_seconds())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.date_is_equal(other)

    def __lt__(self, other: 'Date') -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._value < other.value

    def __gt__(self, other: 'Date') -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._value > other.value

    def __le__(self, other: 'Date') -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.date_is_equal(other) or self._value < other.value

    def __ge__(self, other: 'Date') -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self.date_is_equal(other) or self._value > other.value

    def __hash__(self) -> int:
        return hash(self._value.date())

    def __str__(self) -> str:
        return self.format(DateFormat.SERIALIZE)

    def __repr__(self) -> str:
        return f'Date({self.format(DateFormat.SERIALIZE)})'


@dc.dataclass(slots=True, frozen=True)
class IncludeDates:
    '''
    An overlap found by `Date.in_range`.
    '''
    range_from: Date
    range_to: Date
    source_from: Date
    source_to: Date

    def __str__(self) -> str:
        return (
            f'Overlapping intervals {self.source_from}@{self.source_to} '
            f'and {self.range_from}@{self.range_to}'
        )
