import logging
from typing import Dict, Optional

from fastapi import APIRouter
from pydantic import AnyHttpUrl, BaseModel, Field

from recipe_keeper.app.services import url_recipe_parser
from recipe_keeper.app.services.url_parsing.models import RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import format_duration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


class ParseUrlRequest(BaseModel):
    url: AnyHttpUrl


class ParseUrlResponse(BaseModel):
    success: bool
    recipe: Optional[RecipeRecord] = None
    display_times: Dict[str, str] = Field(default_factory=dict)
    parser_strategy: Optional[str] = None
    message: Optional[str] = None
    error_code: Optional[str] = None


def _display_times(recipe: RecipeRecord) -> Dict[str, str]:
    times = {
        "prep": format_duration(recipe.prep_time),
        "cook": format_duration(recipe.cook_time),
        "total": format_duration(recipe.total_time),
    }
    return {key: value for key, value in times.items() if value}


@router.post("/parse-url", response_model=ParseUrlResponse)
async def parse_recipe_from_url_endpoint(payload: ParseUrlRequest):
    result = await url_recipe_parser.parse_recipe_from_url(str(payload.url))

    if not result.success or not result.recipe:
        logger.info("Parse failed for %s: %s", payload.url, result.error_code)
        return ParseUrlResponse(
            success=False,
            parser_strategy=result.parser_strategy,
            error_code=result.error_code or "parse_failed",
            message=result.error_message,
        )

    return ParseUrlResponse(
        success=True,
        recipe=result.recipe,
        display_times=_display_times(result.recipe),
        parser_strategy=result.parser_strategy,
    )
