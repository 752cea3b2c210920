from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_current_user, require_role
from api.routes import (
    auth,
    committee,
    faculty,
    feedback,
    load_committee,
    notifications,
    registrar,
    schedule_builder,
    student,
    sync,
)


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

_committee = [Depends(require_role("schedule-committee"))]
api_router.include_router(
    schedule_builder.router, prefix="/schedule-committee", tags=["schedule-builder"], dependencies=_committee
)
api_router.include_router(committee.router, prefix="/schedule-committee", tags=["committee"], dependencies=_committee)
api_router.include_router(
    registrar.router, prefix="/registrar", tags=["registrar"], dependencies=[Depends(require_role("registrar"))]
)
api_router.include_router(
    student.router, prefix="/student", tags=["student"], dependencies=[Depends(require_role("student"))]
)
api_router.include_router(
    faculty.router, prefix="/faculty", tags=["faculty"], dependencies=[Depends(require_role("faculty"))]
)
api_router.include_router(
    load_committee.router,
    prefix="/load-committee",
    tags=["load-committee"],
    dependencies=[Depends(require_role("load-committee"))],
)

# Any signed-in role.
_signed_in = [Depends(get_current_user)]
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"], dependencies=_signed_in)
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"], dependencies=_signed_in
)
api_router.include_router(sync.router, prefix="/sync", tags=["sync"], dependencies=_signed_in)
