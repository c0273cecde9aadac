# Copyright (c) 2019 Iotic Labs Ltd. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""QDate, QTime & QDateTime values"""

from collections import namedtuple
from datetime import date, datetime, timedelta, timezone

MSECS_PER_HOUR = 3600000
MSECS_PER_MINUTE = 60000
MSECS_PER_SECOND = 1000

# Julian day number of 1970-01-01
JULIAN_DAY_EPOCH = 2440588


class Date(namedtuple('Date', 'year month day')):
    """Date in the proleptic Gregorian calendar. There is no year 0, the year before 1 is -1 (as with QDate)."""

    __slots__ = ()

    def to_date(self):
        """Returns the equivalent datetime.date. Raises ValueError if the year is outside of what datetime.date
        supports (1 to 9999).
        """
        return date(self.year, self.month, self.day)


class Time(timedelta):
    """Time of day as a duration since midnight, with millisecond resolution."""

    __slots__ = ()

    @property
    def msecs(self):
        return (self.days * 86400 + self.seconds) * MSECS_PER_SECOND + self.microseconds // 1000

    @property
    def hour(self):
        return self.msecs // MSECS_PER_HOUR

    @property
    def minute(self):
        return (self.msecs // MSECS_PER_MINUTE) % 60

    @property
    def second(self):
        return (self.msecs // MSECS_PER_SECOND) % 60

    @property
    def msec(self):
        return self.msecs % MSECS_PER_SECOND


def julian_to_date(julian):
    """Converts a Julian day number to a proleptic Gregorian Date, as done by QDate::fromJulianDay().

    All divisions are floored (Python's // rounds towards negative infinity for either operand sign) which keeps the
    result correct for day numbers before the epoch of the algorithm.
    """
    a = julian + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    if year <= 0:
        year -= 1
    return Date(year, month, day)


def msecs_to_time(msecs):
    return Time(milliseconds=msecs)


def combine(date_, time_, utc):
    """Places date_ at midnight, either in local time (naive datetime) or in UTC (aware datetime), and adds time_ to
    it. Local and UTC results never compare equal.

    Raises:
        ValueError: If the date is outside of the range supported by datetime
        OverflowError: If adding the time moves the instant out of the supported range
    """
    midnight = datetime(date_.year, date_.month, date_.day, tzinfo=(timezone.utc if utc else None))
    return midnight + time_
