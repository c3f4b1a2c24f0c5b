"""Authentication shared kernel module."""

from shared_kernel.auth.identity import (
    IdentityVerifier,
    Principal,
    SupabaseIdentityVerifier,
)
from shared_kernel.auth.observability import (
    DefaultIdentityProbe,
    IdentityProbe,
)

__all__ = [
    "DefaultIdentityProbe",
    "IdentityProbe",
    "IdentityVerifier",
    "Principal",
    "SupabaseIdentityVerifier",
]
