from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from index_studio.core.access import AccessControl, User
from index_studio.dependencies import get_access_control, get_session, get_session_store
from index_studio.schemas import LoginRead, LoginRequest, RoleRead, UserRead
from index_studio.sessions import Session, SessionStore

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_read(user: User, access: AccessControl) -> UserRead:
    role = access.roles.get(user.role)
    return UserRead(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        role_name=role.display_name if role else None,
        permissions=sorted(p.value for p in access.permissions_for(user)),
    )


@router.post("/login", response_model=LoginRead)
async def login(
    body: LoginRequest,
    store: SessionStore = Depends(get_session_store),
    access: AccessControl = Depends(get_access_control),
):
    session = store.login(body.email, body.password)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return LoginRead(token=session.token, user=_user_to_read(session.user, access))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
):
    store.logout(session.token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
async def me(
    session: Session = Depends(get_session),
    access: AccessControl = Depends(get_access_control),
):
    return _user_to_read(session.user, access)


@router.get("/roles", response_model=list[RoleRead])
async def list_roles(access: AccessControl = Depends(get_access_control)):
    return [
        RoleRead(
            name=role.name,
            display_name=role.display_name,
            permissions=sorted(p.value for p in role.permissions),
        )
        for role in access.roles
    ]
