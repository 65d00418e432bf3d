# ganzhi.py
# 간지(干支) 네 기둥: 연주·월주·일주·시주
# Year/month/day/double-hour pillars from a solar or lunar date.

from dataclasses import dataclass
from datetime import date as _date
from types import MappingProxyType

from calendar_convert import (
    get_term,
    lunar2solar,
    normalize_lunar_date_str,
    normalize_solar_date_str,
    solar2lunar,
)

# -------------------------
# 고정 데이터
# -------------------------
HEAVENLY_STEMS = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")
EARTHLY_BRANCHES = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

# 五鼠遁: day stem -> stem of the 子 double-hour
RAT_RULE = MappingProxyType({
    "甲": "甲", "己": "甲",
    "乙": "丙", "庚": "丙",
    "丙": "戊", "辛": "戊",
    "丁": "庚", "壬": "庚",
    "戊": "壬", "癸": "壬",
})

# 23:00-23:59, counted as the 子 hour of the next day
LATE_ZI_INDEX = 12

# 1970-01-01 is day 25577 (辛巳) of the day count
DAY_CYCLE_OFFSET = 25567 + 10

Pillar = tuple[str, str]

def build_sexagenary_cycle() -> tuple[Pillar, ...]:
    return tuple((HEAVENLY_STEMS[i % 10], EARTHLY_BRANCHES[i % 12]) for i in range(60))
SEXAGENARY_CYCLE = build_sexagenary_cycle()

# -------------------------
# 순환 인덱스
# -------------------------
def fix_index(value: int, modulus: int = 12) -> int:
    """Reduce ``value`` into ``[0, modulus - 1]``, negatives included."""
    return value % modulus

def _pillar_from_offset(offset: int) -> Pillar:
    # offset relative to 甲子
    return HEAVENLY_STEMS[fix_index(offset, 10)], EARTHLY_BRANCHES[fix_index(offset, 12)]

def sexagenary_index(pillar: Pillar) -> int:
    try:
        return SEXAGENARY_CYCLE.index(tuple(pillar))
    except ValueError:
        raise ValueError(f"Invalid pillar combo: {''.join(pillar)}") from None

def time_index_from_hour(hour: int) -> int:
    """
    Clock hour -> double-hour index.

    0 is the early 子 hour, 23 the late 子 hour (``LATE_ZI_INDEX``);
    every other hour maps to ``(hour + 1) // 2``.
    """
    if not (0 <= hour <= 23):
        raise ValueError(f"hour must be 0-23, got {hour}")
    if hour == 0:
        return 0
    if hour == 23:
        return LATE_ZI_INDEX
    return (hour + 1) // 2

def _resolve_time_index(time_index: int) -> int:
    # late 子 shares branch 子 with the early one; the extra day is the day rule's job
    return 0 if time_index == LATE_ZI_INDEX else time_index

# -------------------------
# 연주
# -------------------------
def heavenly_stem_and_earthly_branch_of_year(year: int) -> Pillar:
    """Year pillar of a lunar year number (AD 4 is 甲子)."""
    stem_key = (year - 3) % 10
    branch_key = (year - 3) % 12

    # remainder 0 means the last stem / branch
    if stem_key == 0:
        stem_key = 10
    if branch_key == 0:
        branch_key = 12

    return HEAVENLY_STEMS[stem_key - 1], EARTHLY_BRANCHES[branch_key - 1]

# -------------------------
# 월주 (절기 경계)
# -------------------------
def heavenly_stem_and_earthly_branch_of_month(solar_date) -> Pillar:
    """
    Month pillar of a solar date. The pillar advances on the month's
    first solar term (节), not on the first of the month; the term day
    itself already belongs to the new pillar.
    """
    year, month, day = normalize_solar_date_str(solar_date)

    first_node = get_term(year, month * 2 - 1)
    offset = (year - 1900) * 12 + month + 11

    if day >= first_node:
        return _pillar_from_offset(offset + 1)
    return _pillar_from_offset(offset)

# -------------------------
# 일주
# -------------------------
def heavenly_stem_and_earthly_branch_of_day(solar_date, time_index: int) -> Pillar:
    """
    Day pillar of a solar date. ``time_index`` is only consulted for the
    late 子 hour (12), which belongs to the following day.
    """
    year, month, day = normalize_solar_date_str(solar_date)
    day_fix = 1 if time_index == LATE_ZI_INDEX else 0
    day_cyclical = (_date(year, month, 1) - _date(1970, 1, 1)).days + DAY_CYCLE_OFFSET

    return _pillar_from_offset(day_cyclical + day + day_fix - 1)

# -------------------------
# 시주 (五鼠遁)
# -------------------------
def heavenly_stem_and_earthly_branch_of_time(time_index: int, day_stem: str) -> Pillar:
    """
    Pillar of the ``time_index``-th double-hour (0 = 子 ... 11 = 亥) of a
    day whose stem is ``day_stem``.
    """
    start_stem = RAT_RULE[day_stem]
    stem = HEAVENLY_STEMS[fix_index(HEAVENLY_STEMS.index(start_stem) + fix_index(time_index, 10), 10)]
    branch = EARTHLY_BRANCHES[fix_index(time_index)]
    return stem, branch

# -------------------------
# 네 기둥 종합
# -------------------------
@dataclass(frozen=True)
class FourPillars:
    yearly: Pillar
    monthly: Pillar
    daily: Pillar
    timely: Pillar

    def to_string(self) -> str:
        return " ".join("".join(p) for p in (self.yearly, self.monthly, self.daily, self.timely))

    def __str__(self) -> str:
        return self.to_string()

    def as_dict(self) -> dict:
        out = {}
        for key in ("yearly", "monthly", "daily", "timely"):
            stem, branch = getattr(self, key)
            out[key] = {"stem": stem, "branch": branch}
        out["text"] = self.to_string()
        return out

def _build_four_pillars(lunar_year: int, solar_date, time_index: int) -> FourPillars:
    yearly = heavenly_stem_and_earthly_branch_of_year(lunar_year)
    monthly = heavenly_stem_and_earthly_branch_of_month(solar_date)
    daily = heavenly_stem_and_earthly_branch_of_day(solar_date, time_index)
    timely = heavenly_stem_and_earthly_branch_of_time(_resolve_time_index(time_index), daily[0])
    return FourPillars(yearly, monthly, daily, timely)

def get_heavenly_stem_and_earthly_branch_by_lunar_date(date_str: str, time_index: int, is_leap: bool = False) -> FourPillars:
    """
    Four pillars of a lunar date ``YYYY-MM-DD``.

    time_index: 0-12, 12 being the late 子 hour
    is_leap: the month is the year's leap month
    """
    lunar_year, *_ = normalize_lunar_date_str(date_str)
    solar = lunar2solar(date_str, is_leap)
    return _build_four_pillars(lunar_year, solar.to_date(), time_index)

def get_heavenly_stem_and_earthly_branch_by_solar_date(date_str, time_index: int) -> FourPillars:
    """Four pillars of a solar date ``YYYY-MM-DD`` (time_index: 0-12)."""
    lunar = solar2lunar(date_str)
    return _build_four_pillars(lunar.lunar_year, date_str, time_index)

# -------------------------
# 실행 데모
# -------------------------
if __name__ == "__main__":
    fp = get_heavenly_stem_and_earthly_branch_by_solar_date("2023-07-04", 2)
    print("[Four Pillars]")
    print(f" Year : {''.join(fp.yearly)}")
    print(f" Month: {''.join(fp.monthly)}")
    print(f" Day  : {''.join(fp.daily)}")
    print(f" Hour : {''.join(fp.timely)}")
    print(fp)
