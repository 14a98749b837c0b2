"""프로필 서비스 — 매장 내 프로필 관리 및 내 프로필 수정 비즈니스 로직.

Profile Service — Business logic for store profiles (manager side) and
self-service updates of the caller's own profile.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.user import Profile
from nightbase.repositories.profile_repository import profile_repository
from nightbase.schemas.profile import MyProfileUpdate, ProfileCreate, ProfileResponse, ProfileUpdate
from nightbase.utils.exceptions import BadRequestError, NotFoundError


class ProfileService:
    """프로필 관련 비즈니스 로직을 처리하는 서비스.

    Service handling profile business logic. Every operation is scoped to
    one store.
    """

    def _to_response(self, profile: Profile) -> ProfileResponse:
        """프로필 모델을 응답 스키마로 변환합니다."""
        return ProfileResponse(
            id=str(profile.id),
            store_id=str(profile.store_id),
            user_id=str(profile.user_id) if profile.user_id else None,
            display_name=profile.display_name,
            display_name_kana=profile.display_name_kana,
            real_name=profile.real_name,
            role=profile.role,
            phone_number=profile.phone_number,
            status=profile.status,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at,
        )

    async def list_profiles(
        self,
        db: AsyncSession,
        store_id: UUID,
        role: str | None = None,
        search: str | None = None,
    ) -> list[ProfileResponse]:
        """매장의 프로필 목록 — Profiles of the store, filtered by role and name."""
        profiles: list[Profile] = await profile_repository.get_by_store(db, store_id, role, search)
        return [self._to_response(p) for p in profiles]

    async def get_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
    ) -> ProfileResponse:
        """프로필 상세 조회.

        Raises:
            NotFoundError: 매장에 없는 프로필 (Profile not in the store)
        """
        profile: Profile | None = await profile_repository.get_by_id(db, profile_id, store_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return self._to_response(profile)

    async def create_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: ProfileCreate,
    ) -> ProfileResponse:
        """프로필을 생성합니다 — 로그인 계정 없이 생성 (게스트 등).

        Create a profile in the store. Profiles created here are not linked
        to a login user.
        """
        profile: Profile = await profile_repository.create(
            db,
            {"store_id": store_id, **data.model_dump()},
        )
        return self._to_response(profile)

    async def update_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        data: ProfileUpdate,
    ) -> ProfileResponse:
        """프로필을 수정합니다 (부분 업데이트).

        Raises:
            NotFoundError: 매장에 없는 프로필 (Profile not in the store)
        """
        profile: Profile | None = await profile_repository.update(
            db, profile_id, data.model_dump(exclude_unset=True), store_id
        )
        if profile is None:
            raise NotFoundError("Profile not found")
        return self._to_response(profile)

    async def delete_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        current_profile: Profile,
    ) -> None:
        """프로필을 삭제합니다.

        Delete a profile of the store. A manager cannot delete the profile
        they are acting as.

        Raises:
            BadRequestError: 자기 자신의 프로필 삭제 시도 (Deleting own profile)
            NotFoundError: 매장에 없는 프로필 (Profile not in the store)
        """
        if profile_id == current_profile.id:
            raise BadRequestError("Cannot delete your own profile")
        deleted: bool = await profile_repository.delete(db, profile_id, store_id)
        if not deleted:
            raise NotFoundError("Profile not found")

    def get_my_profile(self, profile: Profile) -> ProfileResponse:
        """내 프로필 — The caller's current profile."""
        return self._to_response(profile)

    async def update_my_profile(
        self,
        db: AsyncSession,
        profile: Profile,
        data: MyProfileUpdate,
    ) -> ProfileResponse:
        """내 프로필의 표시 항목을 수정합니다.

        Update the caller's own display fields. Role and status are not
        editable here.
        """
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)
        return self._to_response(profile)


# 싱글턴 인스턴스 — Singleton instance
profile_service: ProfileService = ProfileService()
