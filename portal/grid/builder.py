from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from grid.colors import BLOCKED_STYLES, builder_status_colors, color_for, status_style, text_color_for
from grid.policy import BLOCKED_LABELS, DEFAULT_POLICY, BlockedReason, BlockedWindowPolicy
from grid.timeslots import DEFAULT_TABLE, TimeSlotTable, is_hhmm, to_minutes


# Sections whose day or start time cannot be resolved are filed under this key.
# No Time-Slot Table entry ever looks it up, so they render as empty slots.
UNPLACED = ""

Grid = dict[str, dict[str, Any]]
TimeStrategy = Callable[[Any], "str | None"]


def section_field(section: Any, name: str) -> Any:
    """Read a field from either a raw upstream dict or a pydantic model."""
    if isinstance(section, Mapping):
        return section.get(name)
    value = getattr(section, name, None)
    if value is None:
        extra = getattr(section, "model_extra", None) or {}
        value = extra.get(name)
    return value


def _explicit_hhmm(name: str) -> TimeStrategy:
    def strategy(section: Any) -> str | None:
        raw = section_field(section, name)
        if raw is None:
            return None
        value = str(raw).strip()
        return value if is_hhmm(value) else None

    strategy.__name__ = f"explicit_{name}"
    return strategy


def _sliced_hhmm(name: str) -> TimeStrategy:
    def strategy(section: Any) -> str | None:
        raw = section_field(section, name)
        if raw is None:
            return None
        value = str(raw).strip()[:5]
        return value if is_hhmm(value) else None

    strategy.__name__ = f"sliced_{name}"
    return strategy


START_TIME_FIELDS: tuple[TimeStrategy, ...] = (_explicit_hhmm("start_time_hhmm"), _sliced_hhmm("start_time"))
END_TIME_FIELDS: tuple[TimeStrategy, ...] = (_explicit_hhmm("end_time_hhmm"), _sliced_hhmm("end_time"))


def resolve_time(section: Any, strategies: Iterable[TimeStrategy]) -> str | None:
    """First HH:MM produced by the strategies, in order; None when none match."""
    for strategy in strategies:
        value = strategy(section)
        if value:
            return value
    return None


def start_of(section: Any) -> str | None:
    return resolve_time(section, START_TIME_FIELDS)


def end_of(section: Any) -> str | None:
    return resolve_time(section, END_TIME_FIELDS)


def build_grid(sections: Iterable[Any], *, table: TimeSlotTable = DEFAULT_TABLE) -> Grid:
    """Index sections by canonical day and HH:MM start.

    Iteration order decides collisions: the last section at a (day, start) wins.
    """

    grid: Grid = {}
    for s in sections:
        day = table.canonical_day(section_field(s, "day")) or UNPLACED
        start = start_of(s) or UNPLACED
        grid.setdefault(day, {})[start] = s
    return grid


def span_for(section: Any) -> int:
    """Number of one-hour rows a section occupies. Labs always take two."""
    section_type = section_field(section, "type")
    if isinstance(section_type, str) and section_type.strip().lower() == "lab":
        return 2
    start = to_minutes(start_of(section))
    end = to_minutes(end_of(section))
    if start is None or end is None:
        return 1
    return max(1, (end - start) // 60)


def is_covered(day: str, slot_start: str, grid: Grid, *, table: TimeSlotTable = DEFAULT_TABLE) -> bool:
    """True when an earlier multi-slot section on `day` extends over `slot_start`."""
    slot = to_minutes(slot_start)
    if slot is None:
        return False
    by_start = grid.get(table.canonical_day(day) or UNPLACED) or {}
    for start_key, s in by_start.items():
        start = to_minutes(start_key)
        if start is None:
            continue
        if start < slot and start + span_for(s) * 60 > slot:
            return True
    return False


@dataclass
class CellStyle:
    background: str = "transparent"
    text_color: str = "#000000"
    border_color: str | None = None


Styler = Callable[[Any], CellStyle]


def course_styler(section: Any) -> CellStyle:
    bg = color_for(section_field(section, "course_code"), section_field(section, "type"))
    return CellStyle(background=bg, text_color=text_color_for(bg))


def status_styler(section: Any) -> CellStyle:
    st = status_style(section_field(section, "status"))
    return CellStyle(background=st.bg_color, text_color=st.text_color, border_color=st.border_color)


def builder_status_styler(section: Any) -> CellStyle:
    colors = builder_status_colors(section_field(section, "status"))
    if colors is None:
        return CellStyle()
    bg, text = colors
    return CellStyle(background=bg, text_color=text)


@dataclass
class GridCell:
    day: str
    start: str
    end: str
    section: Any | None = None
    span: int = 1
    blocked: BlockedReason | None = None
    label: str | None = None
    interactive: bool = True
    style: CellStyle = field(default_factory=CellStyle)


@dataclass
class GridRow:
    start: str
    end: str
    cells: list[GridCell] = field(default_factory=list)


@dataclass
class WeeklyGridBuilder:
    """Grid builder shared by every weekly-schedule page.

    Pages inject their own table, policy and cell styler; the build itself is
    pure and recomputed on every call.
    """

    table: TimeSlotTable = DEFAULT_TABLE
    policy: BlockedWindowPolicy = DEFAULT_POLICY
    styler: Styler = course_styler

    def build(self, sections: Iterable[Any]) -> Grid:
        return build_grid(sections, table=self.table)

    def is_covered(self, day: str, slot_start: str, grid: Grid) -> bool:
        return is_covered(day, slot_start, grid, table=self.table)

    def render(self, sections: Iterable[Any]) -> list[GridRow]:
        grid = self.build(sections)
        rows: list[GridRow] = []
        for start, end in self.table.slots:
            row = GridRow(start=start, end=end)
            for day in self.table.days:
                if self.is_covered(day, start, grid):
                    continue
                row.cells.append(self._cell(day, start, end, grid.get(day, {}).get(start)))
            rows.append(row)
        return rows

    def _cell(self, day: str, start: str, end: str, section: Any | None) -> GridCell:
        blocked = self.policy.blocked_reason(day, start, end)
        cell = GridCell(
            day=day,
            start=start,
            end=end,
            section=section,
            span=span_for(section) if section is not None else 1,
            blocked=blocked,
            label=BLOCKED_LABELS.get(blocked) if blocked else None,
            interactive=blocked is None,
        )
        if blocked:
            cell.style = CellStyle(background=BLOCKED_STYLES[blocked], text_color="#6B7280")
        elif section is not None:
            cell.style = self.styler(section)
        return cell


def render_week(
    sections: Iterable[Any],
    *,
    table: TimeSlotTable = DEFAULT_TABLE,
    policy: BlockedWindowPolicy = DEFAULT_POLICY,
    styler: Styler = course_styler,
) -> list[GridRow]:
    return WeeklyGridBuilder(table=table, policy=policy, styler=styler).render(sections)
