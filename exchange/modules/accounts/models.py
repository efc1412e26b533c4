"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class User:
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    password_hash: str = field(repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(slots=True)
class UserCreateInput:
    email: str
    password: str
    first_name: str
    last_name: str


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()


@dataclass(slots=True)
class UserUpdateInput:
    email: Optional[str] | object = UNSET
    first_name: Optional[str] | object = UNSET
    last_name: Optional[str] | object = UNSET


@dataclass(slots=True)
class AuthResult:
    user: User
    token: str
    session_id: str
