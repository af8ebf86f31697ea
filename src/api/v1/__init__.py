"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.addresses import router as addresses_router
from api.v1.routes.auth import me_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.horses import router as horses_router
from api.v1.routes.movements import router as movements_router
from api.v1.routes.professionals import router as professionals_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(me_router)
router.include_router(horses_router)
router.include_router(movements_router)
router.include_router(professionals_router)
router.include_router(addresses_router)
