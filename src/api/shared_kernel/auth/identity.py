"""Bearer token verification against the external identity provider.

Tokens are not decoded locally: the provider's user endpoint is asked who
the token belongs to, and any answer other than a user means the token is
not accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from shared_kernel.auth.observability import (
    DefaultIdentityProbe,
    IdentityProbe,
)

if TYPE_CHECKING:
    from infrastructure.settings import IdentitySettings


@dataclass(frozen=True)
class Principal:
    """The identity a verified bearer token belongs to.

    Attributes:
        id: Identity-provider user id (also the registry user id)
        email: Email address, empty when the provider has none
        username_hint: Preferred username from the provider's user metadata
    """

    id: str
    email: str
    username_hint: str | None = None


@runtime_checkable
class IdentityVerifier(Protocol):
    """Resolves a bearer token to a principal."""

    async def verify(self, token: str) -> Principal | None:
        """Return the token's principal, or None if the token is not accepted."""
        ...


class SupabaseIdentityVerifier:
    """Verifies tokens with a GoTrue-style ``/auth/v1/user`` endpoint.

    The verifier owns an ``httpx.AsyncClient`` for the process lifetime;
    call ``aclose()`` on shutdown.
    """

    def __init__(
        self,
        settings: IdentitySettings,
        probe: IdentityProbe | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            settings: Identity provider settings
            probe: Optional domain probe for observability
            client: HTTP client (replaceable in tests)
        """
        self._base_url = settings.url.rstrip("/")
        self._anon_key = settings.anon_key
        self._probe = probe or DefaultIdentityProbe()
        self._client = client or httpx.AsyncClient(timeout=settings.timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    async def verify(self, token: str) -> Principal | None:
        """Ask the provider who the token belongs to.

        Returns:
            The principal, or None when the token is rejected, the provider
            cannot be reached, or no provider is configured
        """
        if not self.configured:
            self._probe.provider_unconfigured()
            return None

        try:
            response = await self._client.get(
                f"{self._base_url}/auth/v1/user",
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self._anon_key.get_secret_value(),
                },
            )
        except httpx.HTTPError as e:
            self._probe.provider_request_failed(str(e) or type(e).__name__)
            return None

        if response.status_code != 200:
            self._probe.token_rejected(response.status_code)
            return None

        principal = self._to_principal(response.json())
        if principal is None:
            self._probe.token_rejected(response.status_code)
            return None

        self._probe.token_verified(principal.id)
        return principal

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _to_principal(payload: Any) -> Principal | None:
        if not isinstance(payload, dict) or not payload.get("id"):
            return None

        email = payload.get("email") or ""
        metadata = payload.get("user_metadata") or {}
        username = metadata.get("username") if isinstance(metadata, dict) else None
        if not username and email:
            username = email.split("@")[0]

        return Principal(
            id=str(payload["id"]),
            email=email,
            username_hint=username or None,
        )
