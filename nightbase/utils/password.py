"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing helpers built on bcrypt. Login identities (``users``)
store only the bcrypt hash; guest profiles have no password at all.
"""

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다 — Hash with a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Verify a plain password against a stored bcrypt hash.
    Accounts without a hash never verify.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash, may be None)

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    if not hashed_password:
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
