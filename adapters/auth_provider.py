"""Authentication collaborator.

Holds the signed-in identity (None when signed out) and tells listeners when
it changes. The identity is an opaque key that scopes every store path.
"""

import logging
from typing import Awaitable, Callable, List, Optional

logger = logging.getLogger("unimeal.auth")

IdentityListener = Callable[[Optional[str]], None]
Authenticator = Callable[[str], Awaitable[str]]


async def trust_credential(credential: str) -> str:
    """Default authenticator: the credential already is the user id."""
    return credential


class AuthProvider:
    def __init__(self, authenticator: Optional[Authenticator] = None):
        self.identity: Optional[str] = None
        self.loading = False
        self.error: Optional[str] = None
        self._authenticator = authenticator or trust_credential
        self._listeners: List[IdentityListener] = []

    @property
    def signed_in(self) -> bool:
        return bool(self.identity)

    def add_listener(self, listener: IdentityListener) -> Callable[[], None]:
        """Call listener with the current identity now and on every change."""
        self._listeners.append(listener)
        listener(self.identity)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _set_identity(self, identity: Optional[str]) -> None:
        if identity == self.identity:
            return
        self.identity = identity
        for listener in list(self._listeners):
            listener(identity)

    async def sign_in(self, credential: str) -> bool:
        self.loading = True
        self.error = None
        try:
            identity = await self._authenticator(credential)
            if not identity:
                raise ValueError("Authenticator returned an empty identity")
            self._set_identity(identity)
            logger.info("Signed in user %s", identity)
            return True
        except Exception:
            logger.exception("Sign-in failed")
            self.error = "Could not sign in. Please try again."
            return False
        finally:
            self.loading = False

    async def sign_out(self) -> None:
        self.loading = True
        self.error = None
        try:
            previous = self.identity
            self._set_identity(None)
            logger.info("Signed out user %s", previous)
        finally:
            self.loading = False
