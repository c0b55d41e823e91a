from fastapi import APIRouter

from pr_describer.api.v1.webhook import router as webhook_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(webhook_router)
