"""Administrator routes: dashboard counts and account maintenance."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel, Field

from aidportal.domain.aid.query.summary import GetSummary, GetSummaryHandler, StatusSummary
from aidportal.domain.auth.command.password import SetPassword, SetPasswordHandler
from aidportal.domain.auth.query.get_current_user import UserView
from aidportal.domain.auth.query.list_users import ListUsers, ListUsersHandler, UserList

router = APIRouter(prefix="/admin", tags=["Admin"], route_class=DishkaRoute)


class SetPasswordBody(BaseModel):
    password: str = Field(repr=False)


@router.get("/summary", response_model=StatusSummary)
async def get_summary(
    handler: FromDishka[GetSummaryHandler],
) -> StatusSummary:
    """Request counts per status for the dashboard."""
    return await handler.run(GetSummary())


@router.get("/users", response_model=UserList)
async def list_users(
    handler: FromDishka[ListUsersHandler],
    pending_reset_only: bool = False,
) -> UserList:
    return await handler.run(ListUsers(pending_reset_only=pending_reset_only))


@router.post("/users/{user_id}/password", response_model=UserView)
async def set_password(
    user_id: UUID,
    body: SetPasswordBody,
    handler: FromDishka[SetPasswordHandler],
) -> UserView:
    """Set a new password and clear the pending reset flag."""
    return await handler.run(SetPassword(user_id=user_id, password=body.password))
