# calendar_convert.py
# 양력/음력 변환 + 절기 조회 (lunar-python 기반)
# Solar/lunar conversion and solar-term lookup used by the Ganzhi core.

import logging
import re
from dataclasses import dataclass
from datetime import date as _date
from functools import lru_cache

from lunar_python import Lunar, LunarMonth, LunarYear, Solar  # pip install lunar-python

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100

# 小寒(1) → 冬至(24), in Gregorian-year order
SOLAR_TERMS = (
    "小寒", "大寒", "立春", "雨水", "惊蛰", "春分",
    "清明", "谷雨", "立夏", "小满", "芒种", "夏至",
    "小暑", "大暑", "立秋", "处暑", "白露", "秋分",
    "寒露", "霜降", "立冬", "小雪", "大雪", "冬至",
)

_DATE_SEPARATORS = re.compile(r"[-/.\s:_年月日时分秒]+")

# -------------------------
# 결과 구조
# -------------------------
@dataclass(frozen=True)
class SolarDate:
    year: int
    month: int
    day: int

    def to_date(self) -> _date:
        return _date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

@dataclass(frozen=True)
class LunarDate:
    lunar_year: int
    lunar_month: int
    lunar_day: int
    is_leap: bool = False

    def __str__(self) -> str:
        leap = "闰" if self.is_leap else ""
        return f"{self.lunar_year:04d}-{leap}{self.lunar_month:02d}-{self.lunar_day:02d}"

# -------------------------
# 날짜 문자열 정규화
# -------------------------
def _split_date_str(date_str: str) -> tuple[int, int, int]:
    if not isinstance(date_str, str):
        raise ValueError(f"date must be a string, got {type(date_str).__name__}")
    parts = [p for p in _DATE_SEPARATORS.split(date_str.strip()) if p]
    if len(parts) < 3:
        raise ValueError(f"malformed date string: {date_str!r}")
    try:
        year, month, day = (int(p) for p in parts[:3])
    except ValueError as e:
        raise ValueError(f"malformed date string: {date_str!r}") from e
    return year, month, day

def normalize_solar_date_str(date) -> tuple[int, int, int]:
    """
    Decompose a solar date into (year, month, day).

    Accepts ``date``/``datetime`` objects or strings such as ``2023-7-4``,
    ``2023/07/04 10:00`` or ``2023年7月4日``. Any time part is ignored.
    """
    if isinstance(date, _date):
        return date.year, date.month, date.day
    year, month, day = _split_date_str(date)
    # impossible Gregorian dates (2023-02-30 ...) raise here
    _date(year, month, day)
    return year, month, day

def normalize_lunar_date_str(date_str: str) -> tuple[int, int, int]:
    # shape only; calendar validity is checked by lunar2solar
    return _split_date_str(date_str)

def _check_year_range(year: int) -> None:
    if not (MIN_YEAR <= year <= MAX_YEAR):
        raise ValueError(f"year {year} is out of supported range {MIN_YEAR}-{MAX_YEAR}")

# -------------------------
# 음력 → 양력
# -------------------------
def lunar2solar(date_str: str, is_leap: bool = False) -> SolarDate:
    """
    Convert a lunar date string to a solar date.

    ``is_leap`` only takes effect when ``month`` really is the leap month of
    that lunar year; otherwise the ordinary month is used.
    """
    year, month, day = normalize_lunar_date_str(date_str)
    _check_year_range(year)
    if not (1 <= month <= 12):
        raise ValueError(f"lunar month must be 1-12, got {month}")

    leap = bool(is_leap) and LunarYear.fromYear(year).getLeapMonth() == month
    # lunar-python marks leap months with a negative month number
    lunar_month = -month if leap else month

    lm = LunarMonth.fromYm(year, lunar_month)
    if lm is None:
        raise ValueError(f"lunar month {month} does not exist in {year}")
    if not (1 <= day <= lm.getDayCount()):
        raise ValueError(f"lunar day must be 1-{lm.getDayCount()} for {year}-{month}, got {day}")

    try:
        solar = Lunar.fromYmd(year, lunar_month, day).getSolar()
    except Exception as e:
        raise ValueError(f"cannot convert lunar date {date_str!r}: {e}") from e

    result = SolarDate(solar.getYear(), solar.getMonth(), solar.getDay())
    logger.debug("lunar2solar %s (leap=%s) -> %s", date_str, leap, result)
    return result

# -------------------------
# 양력 → 음력
# -------------------------
def solar2lunar(date_str) -> LunarDate:
    year, month, day = normalize_solar_date_str(date_str)
    _check_year_range(year)
    try:
        lunar = Solar.fromYmd(year, month, day).getLunar()
    except Exception as e:
        raise ValueError(f"cannot convert solar date {date_str!r}: {e}") from e

    lunar_month = lunar.getMonth()
    result = LunarDate(
        lunar_year=lunar.getYear(),
        lunar_month=abs(lunar_month),
        lunar_day=lunar.getDay(),
        is_leap=lunar_month < 0,
    )
    logger.debug("solar2lunar %s -> %s", date_str, result)
    return result

# -------------------------
# 절기 (節氣)
# -------------------------
def _jie_qi_table(lunar_year: int) -> dict:
    # mid-year anchor: June 1 always lies inside the lunar year of the same number
    return Solar.fromYmd(lunar_year, 6, 1).getLunar().getJieQiTable()

@lru_cache(maxsize=1024)
def get_term(year: int, term_index: int) -> int:
    """
    Day of month on which the ``term_index``-th solar term (1 = 小寒,
    24 = 冬至) of Gregorian ``year`` falls.
    """
    if not (1 <= term_index <= len(SOLAR_TERMS)):
        raise ValueError(f"term index must be 1-{len(SOLAR_TERMS)}, got {term_index}")
    name = SOLAR_TERMS[term_index - 1]

    # The lunar-year table keys 冬至 to the December of the previous
    # Gregorian year, so December's 冬至 comes from the next lunar year.
    table = _jie_qi_table(year + 1 if term_index == len(SOLAR_TERMS) else year)
    solar = table[name]
    logger.debug("get_term(%d, %d) %s -> %s", year, term_index, name, solar.toYmd())
    return solar.getDay()
