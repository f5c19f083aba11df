from fastapi import APIRouter
from app.api.v1.endpoints import esim

router = APIRouter()

router.include_router(esim.router, prefix="/esim", tags=["esim"])
