from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    seed = [
        (1, "user", "user123", "user"),
        (2, "friend", "friend123", "user"),
        (3, "outsider", "outsider123", "user"),
        (99, "admin", "admin123", "admin"),
    ]
    for user_id, username, password, role in seed:
        _users[username] = {
            "user_id": user_id,
            "password_hash": _hash_password(password),
            "role": role,
        }


def _public(username: str, record: dict[str, Any]) -> dict[str, Any]:
    return {"user_id": record["user_id"], "username": username, "role": record["role"]}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{user_id, username, role}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username, record)
    return None


def get_user(user_id: int) -> dict[str, Any] | None:
    for username, record in _users.items():
        if record["user_id"] == user_id:
            return _public(username, record)
    return None


_seed_users()
