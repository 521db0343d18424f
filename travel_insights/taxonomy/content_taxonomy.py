"""
Catalog and report vocabularies.

``ContentType`` and the area-code table follow the codes used by the public
tourism content API the catalog is loaded from.  ``ReportType`` and
``ReportCategory`` are the closed sets accepted by the report aggregator;
anything outside them is rejected at the request boundary.

This module has NO imports from any other ``travel_insights`` package.
"""

from enum import StrEnum


class ContentType(StrEnum):
    """Catalog content-type codes."""

    TOURIST_SITE = "12"
    CULTURAL_FACILITY = "14"
    FESTIVAL = "15"
    TRAVEL_COURSE = "25"
    LEISURE_SPORTS = "28"
    LODGING = "32"
    SHOPPING = "38"
    RESTAURANT = "39"


CONTENT_TYPE_NAMES: dict[str, str] = {
    ContentType.TOURIST_SITE: "Tourist site",
    ContentType.CULTURAL_FACILITY: "Cultural facility",
    ContentType.FESTIVAL: "Festival",
    ContentType.TRAVEL_COURSE: "Travel course",
    ContentType.LEISURE_SPORTS: "Leisure sports",
    ContentType.LODGING: "Lodging",
    ContentType.SHOPPING: "Shopping",
    ContentType.RESTAURANT: "Restaurant",
}

AREA_NAMES: dict[str, str] = {
    "1": "Seoul",
    "2": "Incheon",
    "3": "Daejeon",
    "4": "Daegu",
    "5": "Gwangju",
    "6": "Busan",
    "7": "Ulsan",
    "8": "Sejong",
    "31": "Gyeonggi",
    "32": "Gangwon",
    "33": "North Chungcheong",
    "34": "South Chungcheong",
    "35": "North Gyeongsang",
    "36": "South Gyeongsang",
    "37": "North Jeolla",
    "38": "South Jeolla",
    "39": "Jeju",
}

UNKNOWN_NAME = "Other"


def content_type_name(code: str | None) -> str:
    """Display name for a content-type code; ``"Other"`` when unknown."""
    return CONTENT_TYPE_NAMES.get(code or "", UNKNOWN_NAME)


def area_name(code: str | None) -> str:
    """Display name for an area code; ``"Other"`` when unknown."""
    return AREA_NAMES.get(code or "", UNKNOWN_NAME)


class Season(StrEnum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


def season_for_month(month: int) -> Season:
    """Map a calendar month (1–12) to its season.

    Mar–May spring, Jun–Aug summer, Sep–Nov autumn, Dec–Feb winter.

    Raises:
        ValueError: If ``month`` is outside 1–12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}.")
    if 3 <= month <= 5:
        return Season.SPRING
    if 6 <= month <= 8:
        return Season.SUMMER
    if 9 <= month <= 11:
        return Season.AUTUMN
    return Season.WINTER


class ReportType(StrEnum):
    """Report cadence; determines the default period."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


REPORT_TYPE_NAMES: dict[str, str] = {
    ReportType.DAILY: "Daily",
    ReportType.WEEKLY: "Weekly",
    ReportType.MONTHLY: "Monthly",
    ReportType.CUSTOM: "Custom",
}


class ReportCategory(StrEnum):
    """One statistic subsystem's slot in a composite report."""

    TIME_SERIES = "time_series"
    """Daily sign-ups, views, bookmarks and reviews."""

    REGION_TYPE = "region_type"
    """Catalog engagement grouped by region and by content type."""

    PERFORMANCE = "performance"
    """API response, page load and web-vital timings plus error rates."""

    COST = "cost"
    """Third-party API usage cost breakdown and savings suggestions."""

    USER_BEHAVIOR = "user_behavior"
    """Sessions, navigation paths, user segments and conversions."""

    PREDICTIONS = "predictions"
    """Sign-up growth trend and next-month projection."""
