from fastapi import APIRouter

from sqlproc.api.routes import procedures, utils

api_router = APIRouter()
api_router.include_router(procedures.router)
api_router.include_router(utils.router)
