"""
Menu and section gating.

``GET /sections/{id}`` answers 200 either way; a denied section comes back
with ``granted: false`` and the restricted message for the client to show.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from index_studio.core.access import SECTIONS, AccessControl, visible_sections
from index_studio.dependencies import get_access_control, get_session
from index_studio.schemas import SectionAccessRead, SectionRead
from index_studio.sessions import Session

router = APIRouter(tags=["navigation"])

RESTRICTED_MESSAGE = "Access restricted: you do not have permission to view this section"


@router.get("/navigation", response_model=list[SectionRead])
async def navigation(
    session: Session = Depends(get_session),
    access: AccessControl = Depends(get_access_control),
):
    return [
        SectionRead(id=s.id, label=s.label, permission=s.permission.value if s.permission else None)
        for s in visible_sections(access, session.user)
    ]


@router.get("/sections/{section_id}", response_model=SectionAccessRead)
async def section_access(
    section_id: str,
    session: Session = Depends(get_session),
    access: AccessControl = Depends(get_access_control),
):
    section = next((s for s in SECTIONS if s.id == section_id), None)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    granted = section.permission is None or access.has_permission(session.user, section.permission)
    return SectionAccessRead(
        section=section.id,
        granted=granted,
        message="ok" if granted else RESTRICTED_MESSAGE,
    )
