# src/taskdeck/auth/auth_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str
    name: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> User:
        return cls(id=str(raw["id"]), email=str(raw.get("email", "")), name=str(raw.get("name", "")))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass(frozen=True, slots=True)
class Credentials:
    """What a successful sign-in/sign-up yields and what gets persisted."""

    user: User
    token: str

    @classmethod
    def from_auth_response(cls, raw: dict[str, Any]) -> Credentials:
        # Auth endpoints answer {user_id, email, name, access_token}.
        user = User(
            id=str(raw["user_id"]),
            email=str(raw.get("email", "")),
            name=str(raw.get("name", "")),
        )
        return cls(user=user, token=str(raw["access_token"]))
