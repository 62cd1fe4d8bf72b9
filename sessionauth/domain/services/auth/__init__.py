from .credentials import CredentialVerifier
from .gate import AuthGate, Flash, GateResult
from .local import LocalStrategy
from .oauth import OAuthStrategy
from .session import SessionCodec

__all__ = [
    "AuthGate",
    "CredentialVerifier",
    "Flash",
    "GateResult",
    "LocalStrategy",
    "OAuthStrategy",
    "SessionCodec",
]
