"""Authentication routes: registration, logins and password reset requests."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from aidportal.domain.auth.command.login import (
    AdminLogin,
    AdminLoginHandler,
    Login,
    LoginHandler,
    Register,
    RegisterHandler,
    SessionIssued,
)
from aidportal.domain.auth.command.password import (
    RequestReset,
    RequestResetHandler,
    ResetRequested,
)
from aidportal.domain.auth.query.get_current_user import (
    GetCurrentUser,
    GetCurrentUserHandler,
    UserView,
)

router = APIRouter(prefix="/auth", tags=["Authentication"], route_class=DishkaRoute)


@router.post("/register", response_model=SessionIssued, status_code=201)
async def register(
    body: Register,
    handler: FromDishka[RegisterHandler],
) -> SessionIssued:
    return await handler.run(body)


@router.post("/login", response_model=SessionIssued)
async def login(
    body: Login,
    handler: FromDishka[LoginHandler],
) -> SessionIssued:
    return await handler.run(body)


@router.post("/admin", response_model=SessionIssued)
async def admin_login(
    body: AdminLogin,
    handler: FromDishka[AdminLoginHandler],
) -> SessionIssued:
    """Exchange the shared administrator secret for an admin session."""
    return await handler.run(body)


@router.post("/reset-request", response_model=ResetRequested, status_code=202)
async def request_reset(
    body: RequestReset,
    handler: FromDishka[RequestResetHandler],
) -> ResetRequested:
    """Flag the account so an administrator can set a new password."""
    return await handler.run(body)


@router.get("/me", response_model=UserView)
async def get_current_user(
    handler: FromDishka[GetCurrentUserHandler],
) -> UserView:
    return await handler.run(GetCurrentUser())
