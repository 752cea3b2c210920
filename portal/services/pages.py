"""Page controllers for the weekly schedule screens.

Each controller fetches one page's section list through the snapshot store
and hands it to a shared `WeeklyGridBuilder`. Controllers differ only in the
upstream path they read, the snapshot topic and the cell styler.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from core.config import settings
from core.upstream import UpstreamClient
from grid.builder import GridRow, WeeklyGridBuilder, builder_status_styler, course_styler, status_styler
from schemas.grid import CellStyleOut, GridCellOut, GridRowOut, WeeklyGridOut
from schemas.section import SectionOut
from services.reload_bus import COMMITTEE_DASHBOARD, SCHEDULE_BUILDER
from services.snapshots import Snapshot, SnapshotStore, view_key


def section_rows(data: Any) -> list[Any]:
    """Section list from an upstream body: a bare list or `{"sections": [...]}`."""
    if isinstance(data, dict):
        data = data.get("sections")
    return list(data) if isinstance(data, list) else []


def to_sections(rows: Iterable[Any]) -> list[SectionOut]:
    return [SectionOut.model_validate(r) for r in rows if isinstance(r, dict)]


def grid_rows_out(rows: list[GridRow]) -> list[GridRowOut]:
    out: list[GridRowOut] = []
    for row in rows:
        cells = [
            GridCellOut(
                day=c.day,
                start=c.start,
                end=c.end,
                section=c.section,
                span=c.span,
                blocked=c.blocked,
                label=c.label,
                interactive=c.interactive,
                style=CellStyleOut(
                    background=c.style.background,
                    text_color=c.style.text_color,
                    border_color=c.style.border_color,
                ),
            )
            for c in row.cells
        ]
        out.append(GridRowOut(start=row.start, end=row.end, cells=cells))
    return out


class WeeklySchedulePage:
    topic: str = ""
    path: str = "/sections"

    def __init__(
        self,
        upstream: UpstreamClient,
        store: SnapshotStore,
        *,
        builder: WeeklyGridBuilder | None = None,
    ):
        self.upstream = upstream
        self.store = store
        self.builder = builder or self.default_builder()

    def default_builder(self) -> WeeklyGridBuilder:
        return WeeklyGridBuilder(styler=course_styler)

    def request(self, **scope: Any) -> tuple[str, dict[str, Any] | None]:
        return self.path, None

    def load(self, **scope: Any) -> Snapshot:
        path, params = self.request(**scope)
        key = view_key(self.topic, **scope)
        return self.store.load(key, lambda: section_rows(self.upstream.get(path, params=params)))

    def view(self, sections: list[SectionOut], snapshot: Snapshot) -> WeeklyGridOut:
        return WeeklyGridOut(
            days=list(self.builder.table.days),
            rows=grid_rows_out(self.builder.render(sections)),
            sections=sections,
            version=snapshot.version,
            fetched_at=snapshot.fetched_at,
            stale=snapshot.stale,
            poll_interval_seconds=settings.poll_interval_seconds,
        )

    def render(self, **scope: Any) -> tuple[WeeklyGridOut, list[SectionOut]]:
        snap = self.load(**scope)
        sections = to_sections(snap.rows)
        return self.view(sections, snap), sections


class ScheduleBuilderPage(WeeklySchedulePage):
    topic = SCHEDULE_BUILDER

    def default_builder(self) -> WeeklyGridBuilder:
        return WeeklyGridBuilder(styler=builder_status_styler)

    def request(self, *, level_id: Any = None, group_id: Any = None) -> tuple[str, dict[str, Any] | None]:
        return "/sections", {"level_id": level_id, "group_id": group_id}


class LoadCommitteePage(WeeklySchedulePage):
    topic = COMMITTEE_DASHBOARD

    def default_builder(self) -> WeeklyGridBuilder:
        return WeeklyGridBuilder(styler=status_styler)


class LevelSchedulePage(WeeklySchedulePage):
    topic = "all_levels"

    def request(self, *, level_id: Any = None, group_id: Any = None) -> tuple[str, dict[str, Any] | None]:
        return "/sections", {"level_id": level_id, "group_id": group_id}


class StudentSchedulePage(WeeklySchedulePage):
    topic = "student_schedule"

    def request(self, *, user_id: Any) -> tuple[str, dict[str, Any] | None]:
        return f"/sections/schedule/{user_id}", None


class FacultySchedulePage(WeeklySchedulePage):
    topic = "faculty_schedule"

    def request(self, *, user_id: Any) -> tuple[str, dict[str, Any] | None]:
        return f"/sections/faculty/{user_id}", None

