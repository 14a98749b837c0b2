"""앱 API 라우터 패키지 — 매장 구성원용 엔드포인트 통합.

App API Router package — Aggregates every endpoint used by store members
(cast, staff, admin and guests) into a single router. The store is
always the one of the caller's active profile.
"""

from fastapi import APIRouter

from nightbase.api.app.auth import router as auth_router
from nightbase.api.app.profile import router as profile_router
from nightbase.api.app.store import router as store_router

# 메뉴·보틀 — Menus and bottle keeps
from nightbase.api.app.menus import router as menus_router
from nightbase.api.app.bottles import router as bottles_router

# 시프트·근태 — Shifts and attendance
from nightbase.api.app.shift_requests import router as shift_requests_router
from nightbase.api.app.my_shifts import router as my_shifts_router
from nightbase.api.app.attendance import router as attendance_router

# 소통·홍보 — Comments, SNS, AI and uploads
from nightbase.api.app.comments import router as comments_router
from nightbase.api.app.sns import router as sns_router
from nightbase.api.app.ai import router as ai_router
from nightbase.api.app.storage import router as storage_router

app_router: APIRouter = APIRouter()

app_router.include_router(auth_router, prefix="/auth", tags=["App Auth"])
# 프로필: /profile, /profiles (My profile and store profiles)
app_router.include_router(profile_router, tags=["Profiles"])
app_router.include_router(store_router, prefix="/store", tags=["Store"])

# 메뉴: /menus, /menu-categories
app_router.include_router(menus_router, tags=["Menus"])
app_router.include_router(bottles_router, prefix="/bottles", tags=["Bottle Keeps"])

# 시프트 모집: /shift-requests, /shift-submissions
app_router.include_router(shift_requests_router, tags=["Shift Requests"])
app_router.include_router(my_shifts_router, prefix="/my-shifts", tags=["My Shifts"])
app_router.include_router(attendance_router, prefix="/attendance", tags=["Attendance"])

app_router.include_router(comments_router, prefix="/comments", tags=["Comments"])
app_router.include_router(sns_router, prefix="/sns", tags=["SNS"])
app_router.include_router(ai_router, prefix="/ai", tags=["AI"])
app_router.include_router(storage_router, prefix="/storage", tags=["Storage"])
