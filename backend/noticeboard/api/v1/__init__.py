"""API v1 router configuration."""

from fastapi import APIRouter

from noticeboard.api.v1 import comments, members, posts

api_router = APIRouter()

api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(comments.router, prefix="", tags=["comments"])
