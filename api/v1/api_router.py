# app/api/v1/api_router.py
from fastapi import APIRouter
from api.v1.endpoints import (
    # Authentication & Users
    auth,

    # Incidents
    reports,
    comments,
    sos,

    # Relief
    shelters,

    # Administration
    admin,
    ai,
)

api_router = APIRouter()

# ========== 1️⃣ Authentication & Users ==========
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# ========== 2️⃣ Incidents ==========
api_router.include_router(reports.router, prefix="/reports", tags=["Flood Reports"])
api_router.include_router(comments.router, prefix="/comments", tags=["Comments"])
api_router.include_router(sos.router, prefix="/sos", tags=["SOS Requests"])

# ========== 3️⃣ Relief ==========
api_router.include_router(shelters.router, prefix="/shelters", tags=["Shelters"])

# ========== 4️⃣ Administration ==========
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(ai.router, prefix="/ai", tags=["AI Assistance"])
