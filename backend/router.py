from fastapi import APIRouter

# Compose modular sub-routers
from api import hackathons_router, evaluations_router, judges_router


router = APIRouter()

# main.py applies `/api` prefix; sub-routers declare their full paths
router.include_router(hackathons_router)
router.include_router(evaluations_router)
router.include_router(judges_router)
