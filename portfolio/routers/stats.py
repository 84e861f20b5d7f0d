from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portfolio.dao import ContactDAO, PostDAO
from portfolio.deps import get_db, require_admin
from portfolio.schemas import CategoryCount, PostResponse, StatsResponse

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StatsResponse, dependencies=[Depends(require_admin)])
def get_stats(
    db: Annotated[Session, Depends(get_db)],
) -> StatsResponse:
    """
    Aggregate numbers for the admin dashboard.
    """
    posts = PostDAO(db)
    contacts = ContactDAO(db)
    return StatsResponse(
        total_posts=posts.count(),
        total_views=posts.total_views(),
        total_likes=posts.total_likes(),
        total_messages=contacts.count(),
        unread_messages=contacts.count(status="new"),
        posts_by_category=[
            CategoryCount(category=category, count=count)
            for category, count in posts.count_by_category()
        ],
        recent_posts=[PostResponse.model_validate(p) for p in posts.recent()],
        top_posts=[PostResponse.model_validate(p) for p in posts.most_viewed()],
    )
