# backend/app/services/vault.py
"""
Binding vault: ownership and uniqueness rules around encrypted OTP secrets.

The raw secret only exists in memory at two places:
- create / rotate, right before SecretCipher.encrypt
- generate / verify, right after SecretCipher.decrypt

It is never logged and never returned to the caller.
"""
import logging
import time
from typing import Callable, List, NamedTuple, Optional, Tuple

from backend.app.core.config import VaultConfig
from backend.app.core.errors import (
    ConflictError,
    CryptoError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from backend.app.models.binding import Binding
from backend.app.repositories.bindings import BindingStore
from backend.app.security import totp
from backend.app.security.cipher import SecretCipher

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class GeneratedCode(NamedTuple):
    code: str
    expires_in_seconds: int


class BindingVault:
    """
    One instance per request.

    Args:
        store: storage backend for bindings
        config: master key and OTP settings, loaded once at startup
        clock: returns the current POSIX time; injectable for tests
    """

    def __init__(self, store: BindingStore, config: VaultConfig, clock: Callable[[], float] = time.time):
        self.store = store
        self.cipher = SecretCipher(config.master_key)
        self.verify_window = config.verify_window
        self.clock = clock

    # ─────────────────────────────────────────────────────────────
    # Lookup with ownership check
    # ─────────────────────────────────────────────────────────────
    async def get_binding(self, binding_id: str, user_id: str) -> Binding:
        binding = await self.store.load_binding_by_id(binding_id)
        if binding is None:
            raise NotFoundError("Account binding not found")
        if binding.user_id != user_id:
            logger.warning("User %s denied access to binding %s", user_id, binding_id)
            raise ForbiddenError()
        return binding

    async def list_bindings(self, user_id: str, page: int = 1, limit: int = 20) -> Tuple[List[Binding], int]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        limit = min(limit, MAX_PAGE_SIZE)
        return await self.store.list_by_owner(user_id, (page - 1) * limit, limit)

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────
    async def _ensure_unique(self, user_id: str, platform_id: str, account_name: str,
                             exclude_id: Optional[str] = None) -> None:
        existing = await self.store.find_by_owner_platform_account(user_id, platform_id, account_name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("This account is already registered for the platform")

    async def create_binding(self, user_id: str, platform_id: str, account_name: str, raw_secret: str) -> Binding:
        secret = totp.normalize_secret(raw_secret)
        await self._ensure_unique(user_id, platform_id, account_name)

        binding = Binding(
            user_id=user_id,
            platform_id=platform_id,
            account_name=account_name,
            encrypted_secret=self.cipher.encrypt(secret),
        )
        binding = await self.store.save_binding(binding)
        logger.info("Binding %s created for user %s", binding.id, user_id)
        return binding

    async def update_binding(self, binding_id: str, user_id: str,
                             account_name: Optional[str] = None,
                             raw_secret: Optional[str] = None) -> Binding:
        """Rename the account and/or rotate its secret."""
        binding = await self.get_binding(binding_id, user_id)

        if account_name and account_name != binding.account_name:
            await self._ensure_unique(user_id, binding.platform_id, account_name, exclude_id=binding.id)
            binding.account_name = account_name

        if raw_secret:
            # Fresh nonce; the previous blob is overwritten, not kept
            binding.encrypted_secret = self.cipher.encrypt(totp.normalize_secret(raw_secret))
            logger.info("Secret rotated for binding %s", binding.id)

        return await self.store.save_binding(binding)

    async def delete_binding(self, binding_id: str, user_id: str) -> None:
        await self.get_binding(binding_id, user_id)
        await self.store.delete_binding(binding_id)
        logger.info("Binding %s deleted by user %s", binding_id, user_id)

    # ─────────────────────────────────────────────────────────────
    # OTP
    # ─────────────────────────────────────────────────────────────
    def _reveal_secret(self, binding: Binding) -> str:
        try:
            return self.cipher.decrypt(binding.encrypted_secret)
        except CryptoError as exc:
            # Never retried; the blob itself stays out of the log
            logger.error("Could not decrypt secret of binding %s (%s)", binding.id, type(exc).__name__)
            raise

    async def generate_code(self, binding_id: str, user_id: str) -> GeneratedCode:
        binding = await self.get_binding(binding_id, user_id)
        secret = self._reveal_secret(binding)
        otp = totp.generate(secret, self.clock())
        return GeneratedCode(code=otp.code, expires_in_seconds=otp.remaining_seconds)

    async def verify_code(self, binding_id: str, user_id: str, candidate: str) -> bool:
        binding = await self.get_binding(binding_id, user_id)
        secret = self._reveal_secret(binding)
        return totp.verify(secret, candidate, self.clock(), window=self.verify_window)
