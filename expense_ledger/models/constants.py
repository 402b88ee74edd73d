from enum import Enum

# Label substituted for records whose category is missing or blank.
UNCATEGORIZED = "Uncategorized"

DATE_FORMAT = "%Y-%m-%d"


class FilterSelector(str, Enum):
    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @classmethod
    def parse(cls, value: "str | FilterSelector") -> "FilterSelector":
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(f"unknown filter '{value}' (expected one of {allowed})") from None


# Rolling window used by the WEEK selector, in whole days.
WEEK_WINDOW_DAYS = 7
