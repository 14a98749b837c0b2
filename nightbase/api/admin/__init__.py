"""관리자 API 라우터 패키지 — 플랫폼 관리자 엔드포인트 통합.

Admin API Router package — Aggregates the platform-admin endpoints:
login, store management, the generic table browser and the dashboard.
"""

from fastapi import APIRouter

from nightbase.api.admin.auth import router as auth_router
from nightbase.api.admin.stores import router as stores_router
from nightbase.api.admin.tables import router as tables_router
from nightbase.api.admin.dashboard import router as dashboard_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(auth_router, prefix="/auth", tags=["Admin Auth"])
admin_router.include_router(stores_router, prefix="/stores", tags=["Stores"])
# 테이블 브라우저: /tables/{table} 하위 (Generic table browser)
admin_router.include_router(tables_router, prefix="/tables", tags=["Table Browser"])
admin_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
