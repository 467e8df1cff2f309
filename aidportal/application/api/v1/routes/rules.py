from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from aidportal.domain.aid.query.rules import GetRules, GetRulesHandler, ProgramRules

router = APIRouter(tags=["Rules"], route_class=DishkaRoute)


@router.get("/rules", response_model=ProgramRules)
async def get_rules(
    handler: FromDishka[GetRulesHandler],
) -> ProgramRules:
    return await handler.run(GetRules())
