from __future__ import annotations

from dataclasses import dataclass


COURSE_COLORS: dict[str, tuple[str, ...]] = {
    "primary": ("#6366F1", "#8B5CF6", "#A855F7", "#D946EF"),
    "secondary": ("#EC4899", "#F43F5E", "#EF4444", "#F97316"),
    "accent": ("#F59E0B", "#EAB308", "#84CC16", "#22C55E"),
    "neutral": ("#06B6D4", "#0EA5E9", "#3B82F6", "#60A5FA"),
}

PALETTE: tuple[str, ...] = tuple(c for group in COURSE_COLORS.values() for c in group)

NEUTRAL_COLOR = "#F3F4F6"
DARK_TEXT = "#1F2937"
LIGHT_TEXT = "#FFFFFF"


@dataclass(frozen=True)
class StatusStyle:
    color: str
    bg_color: str
    text_color: str
    border_color: str


STATUS_STYLES: dict[str, StatusStyle] = {
    "Draft": StatusStyle(color="#6B7280", bg_color="#F3F4F6", text_color="#374151", border_color="#D1D5DB"),
    "Accepted": StatusStyle(color="#10B981", bg_color="#ECFDF5", text_color="#065F46", border_color="#A7F3D0"),
    "Rejected": StatusStyle(color="#EF4444", bg_color="#FEF2F2", text_color="#991B1B", border_color="#FECACA"),
}

# Schedule builder cells: lighter fills, no border; unknown or missing status stays unstyled.
BUILDER_STATUS_STYLES: dict[str, tuple[str, str]] = {
    "accepted": ("#dcfce7", "#166534"),
    "rejected": ("#fee2e2", "#991b1b"),
    "draft": ("#f3f4f6", "#374151"),
}

BLOCKED_STYLES: dict[str, str] = {
    "lunch": "rgba(253, 230, 138, 0.5)",
    "exam": "rgba(252, 165, 165, 0.4)",
}


def string_hash(value: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to a signed 32-bit int.

    Matches the hash browsers compute for the same string, so a course keeps the
    color users already know from the web dashboards.
    """

    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return h


def color_for(code: str | None, section_type: str | None = None) -> str:
    """Palette color for a course code; NEUTRAL_COLOR when the code is empty.

    `section_type` is accepted so call sites can pass the section as they have it,
    but labs and lectures share one color per course.
    """

    if not code:
        return NEUTRAL_COLOR
    return PALETTE[abs(string_hash(code)) % len(PALETTE)]


def text_color_for(bg_color: str) -> str:
    color = bg_color.lstrip("#")
    r = int(color[0:2], 16)
    g = int(color[2:4], 16)
    b = int(color[4:6], 16)
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return DARK_TEXT if brightness > 128 else LIGHT_TEXT


def status_style(status: str | None) -> StatusStyle:
    key = (status or "").strip().capitalize()
    return STATUS_STYLES.get(key, STATUS_STYLES["Draft"])


def builder_status_colors(status: str | None) -> tuple[str, str] | None:
    """(background, text) for a builder cell, or None when the status is unknown."""
    return BUILDER_STATUS_STYLES.get((status or "").strip().lower())
