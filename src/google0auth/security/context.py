"""Authentication result passed explicitly to request handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Authentication:
    """The outcome of authenticating a single request.

    Created by the security filter for every request and attached to
    `request.state.authentication`. Handlers receive it as a dependency
    parameter rather than looking it up from a global.
    """

    principal: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    authenticated: bool = False

    @classmethod
    def anonymous(cls) -> Authentication:
        return cls()

    @classmethod
    def for_principal(cls, principal: str, attributes: dict[str, Any]) -> Authentication:
        return cls(principal=principal, attributes=dict(attributes), authenticated=True)

    @property
    def email(self) -> str | None:
        return self.attributes.get("email")
