# backend/app/core/errors.py
"""
Domain errors raised by the vault, the OTP engine and the services.

Each error carries the HTTP status and the detail string the API layer
returns. Crypto errors share one opaque detail so callers cannot tell a
malformed blob from a failed authentication tag.
"""


class VaultError(Exception):
    """Base class for all domain errors."""
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def public_detail(self) -> str:
        """Message that is safe to return to the caller."""
        return self.detail


class ConfigurationError(VaultError):
    """Fatal startup condition (missing or weak master key, insecure secrets)."""


# ─────────────────────────────────────────────────────────────────────────────
# Cryptographic failures (decrypt time)
# ─────────────────────────────────────────────────────────────────────────────
class CryptoError(VaultError):
    status_code = 500
    default_detail = "Operation failed"

    @property
    def public_detail(self) -> str:
        return CryptoError.default_detail


class CryptoFormatError(CryptoError):
    """Blob does not parse as nonce:ciphertext:tag hex."""


class CryptoIntegrityError(CryptoError):
    """Authentication tag did not verify (tampered blob or wrong key)."""


class InvalidSecretError(VaultError):
    status_code = 422
    default_detail = "OTP secret is not valid base32"


# ─────────────────────────────────────────────────────────────────────────────
# Lifecycle rule violations (safe to show to the user)
# ─────────────────────────────────────────────────────────────────────────────
class NotFoundError(VaultError):
    status_code = 404
    default_detail = "Not found"


class ForbiddenError(VaultError):
    status_code = 403
    default_detail = "You do not have access to this resource"


class ConflictError(VaultError):
    status_code = 409
    default_detail = "Resource already exists"


class ValidationError(VaultError):
    status_code = 400
    default_detail = "Invalid request"


class AuthenticationError(VaultError):
    status_code = 401
    default_detail = "Could not validate credentials"
