from fastapi import APIRouter

from hero_banners.modules.review_actions import router as review_actions_router
from hero_banners.modules.submissions import router as submissions_router

api_router = APIRouter()

api_router.include_router(submissions_router, prefix="/api", tags=["Submissions"])

# Mounted at the root: reviewer emails link to /review
api_router.include_router(review_actions_router, tags=["Review Actions"])
