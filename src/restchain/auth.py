"""Authentication strategies applied to every request made through an Api handle."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum


class AuthKind(str, Enum):
    """Closed set of supported authentication schemes."""
    BEARER = "bearer"
    BASIC = "basic"
    NONE = "none"


@dataclass(frozen=True)
class Auth:
    """Immutable auth configuration shared by all calls on a handle.

    Attributes:
        kind: Which header-construction rule to apply
        credential: Token for BEARER, "user:password" for BASIC, None for NONE
        header_name: Header populated by get_headers()

    Example:
        auth = Auth.bearer("abc")
        auth.get_headers()  # {"Authorization": "Bearer abc"}
    """
    kind: AuthKind
    credential: str | None = None
    header_name: str = "Authorization"

    def __post_init__(self):
        if self.kind is not AuthKind.NONE and not self.credential:
            raise ValueError(f"{self.kind.value} auth requires a non-empty credential")
        if not self.header_name:
            raise ValueError("header_name must not be empty")

    @classmethod
    def bearer(cls, token: str, header_name: str = "Authorization") -> "Auth":
        return cls(AuthKind.BEARER, token, header_name)

    @classmethod
    def basic(cls, username: str, password: str, header_name: str = "Authorization") -> "Auth":
        return cls(AuthKind.BASIC, f"{username}:{password}", header_name)

    @classmethod
    def none(cls) -> "Auth":
        return cls(AuthKind.NONE)

    def get_headers(self) -> dict[str, str]:
        """Build the headers contributed by this strategy.

        Returns a fresh dict on every call, empty for AuthKind.NONE.
        """
        if self.kind is AuthKind.BEARER:
            return {self.header_name: f"Bearer {self.credential}"}
        if self.kind is AuthKind.BASIC:
            encoded = base64.b64encode(self.credential.encode("utf-8")).decode("ascii")
            return {self.header_name: f"Basic {encoded}"}
        return {}

    def __repr__(self) -> str:
        # Keep credentials out of logs
        return f"Auth(kind={self.kind.value!r}, header_name={self.header_name!r})"
