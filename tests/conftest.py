"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session and httpx client
fixtures. Every test gets a fresh database: the schema is created from the
ORM metadata on a StaticPool connection and foreign keys are enforced so
ON DELETE rules behave like PostgreSQL.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from nightbase.database import Base, get_db
from nightbase.main import app
import nightbase.models  # noqa: F401 — register all models with metadata
from nightbase.models.store import Store
from nightbase.models.user import Profile, User
from nightbase.utils.jwt import create_access_token
from nightbase.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "password123!"


# ---------------------------------------------------------------------------
# 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@dataclass
class Member:
    """로그인 가능한 매장 구성원 — User with its active profile."""

    user: User
    profile: Profile

    @property
    def token(self) -> str:
        return make_token(self.user)


async def create_store(db: AsyncSession, name: str) -> Store:
    s = Store(name=name, industry="キャバクラ", prefecture="東京都", city="新宿区")
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return s


async def create_member(
    db: AsyncSession,
    store: Store,
    role: str,
    email: str,
    display_name: str | None = None,
) -> Member:
    """사용자와 프로필을 만들고 현재 프로필로 선택합니다."""
    user = User(
        email=email,
        display_name=display_name or role.title(),
        password_hash=hash_password(TEST_PASSWORD),
    )
    db.add(user)
    await db.flush()
    profile = Profile(
        store_id=store.id,
        user_id=user.id,
        display_name=display_name or role.title(),
        role=role,
    )
    db.add(profile)
    await db.flush()
    user.current_profile_id = profile.id
    await db.flush()
    await db.refresh(user)
    await db.refresh(profile)
    return Member(user=user, profile=profile)


async def create_guest(db: AsyncSession, store: Store, name: str = "山田様") -> Profile:
    """로그인 계정 없는 게스트 프로필."""
    profile = Profile(store_id=store.id, display_name=name, role="guest")
    db.add(profile)
    await db.flush()
    await db.refresh(profile)
    return profile


@pytest_asyncio.fixture
async def store(db: AsyncSession) -> Store:
    """테스트 매장을 생성합니다."""
    return await create_store(db, "Club Luna")


@pytest_asyncio.fixture
async def other_store(db: AsyncSession) -> Store:
    """테넌트 분리 확인용 두 번째 매장."""
    return await create_store(db, "Club Sol")


@pytest_asyncio.fixture
async def owner(db: AsyncSession, store) -> Member:
    """매장 관리자(admin 역할) 구성원."""
    return await create_member(db, store, "admin", "owner@luna.test", "オーナー")


@pytest_asyncio.fixture
async def staff(db: AsyncSession, store) -> Member:
    """스태프 구성원."""
    return await create_member(db, store, "staff", "staff@luna.test", "黒服")


@pytest_asyncio.fixture
async def cast(db: AsyncSession, store) -> Member:
    """캐스트 구성원."""
    return await create_member(db, store, "cast", "cast@luna.test", "あやか")


@pytest_asyncio.fixture
async def cast2(db: AsyncSession, store) -> Member:
    return await create_member(db, store, "cast", "cast2@luna.test", "みゆ")


@pytest_asyncio.fixture
async def outsider(db: AsyncSession, other_store) -> Member:
    """다른 매장의 관리자 — Admin of another store."""
    return await create_member(db, other_store, "admin", "owner@sol.test", "他店オーナー")


@pytest_asyncio.fixture
async def platform_admin(db: AsyncSession) -> User:
    """플랫폼 관리자 — 프로필 없음."""
    user = User(
        email="root@nightbase.test",
        display_name="Platform Admin",
        password_hash=hash_password(TEST_PASSWORD),
        is_admin=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    payload: dict[str, str | bool] = {"sub": str(user.id), "admin": user.is_admin}
    if user.current_profile_id is not None:
        payload["profile"] = str(user.current_profile_id)
    return create_access_token(payload)


@pytest.fixture
def admin_token(platform_admin) -> str:
    return make_token(platform_admin)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
