import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

FIELDS = ("days", "hours", "minutes", "seconds")
FIELD_LIMITS = {"days": 999, "hours": 23, "minutes": 59, "seconds": 59}

MS_PER_DAY = 86_400_000
MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000

_DIGITS = re.compile(r"^[0-9]+\Z")


@dataclass(frozen=True)
class TimeRemaining:
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @classmethod
    def zero(cls) -> "TimeRemaining":
        return cls()

    @classmethod
    def from_total_seconds(cls, total: int) -> "TimeRemaining":
        total = max(0, int(total))
        return cls(
            days=total // 86400,
            hours=(total % 86400) // 3600,
            minutes=(total % 3600) // 60,
            seconds=total % 60,
        )

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["TimeRemaining"]:
        if not isinstance(raw, dict):
            return None
        values = {}
        for name in FIELDS:
            v = raw.get(name)
            # bool is an int subclass; reject it explicitly
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                return None
            values[name] = v
        return cls(**values)

    def total_seconds(self) -> int:
        return self.days * 86400 + self.hours * 3600 + self.minutes * 60 + self.seconds

    def is_zero(self) -> bool:
        return self.total_seconds() == 0

    def to_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in FIELDS}

    def replace_field(self, field: str, value: int) -> "TimeRemaining":
        if field not in FIELDS:
            raise KeyError(field)
        return replace(self, **{field: int(value)})


def local_now() -> datetime:
    return datetime.now().astimezone()


def target_instant(year: int) -> datetime:
    """Local midnight at the start of ``year``."""
    # astimezone resolves the offset in effect on that date, not today's
    return datetime(year, 1, 1).astimezone()


def time_until(target: datetime, now: datetime) -> TimeRemaining:
    delta = target - now
    difference = (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000
    if difference <= 0:
        return TimeRemaining.zero()
    return TimeRemaining(
        days=difference // MS_PER_DAY,
        hours=(difference // MS_PER_HOUR) % 24,
        minutes=(difference // MS_PER_MINUTE) % 60,
        seconds=(difference // MS_PER_SECOND) % 60,
    )


def format_block_value(value: int) -> str:
    return f"{int(value):02d}"


def parse_field_input(text: str, maximum: int) -> Optional[int]:
    """Return the entered number if it is an integer in [0, maximum], else None."""
    text = str(text).strip()
    if not _DIGITS.match(text):
        return None
    value = int(text)
    if value < 0 or value > maximum:
        return None
    return value
