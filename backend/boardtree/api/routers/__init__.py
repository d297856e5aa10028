from fastapi import APIRouter

from boardtree.api.routers.boards import router as boards_router

api_router = APIRouter()


@api_router.get("/hello", tags=["health"])
async def hello() -> dict:
    return {"message": "Hello from the board service!"}


api_router.include_router(boards_router, prefix="/boards", tags=["boards"])
