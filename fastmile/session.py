"""Session returned by a successful login."""

from __future__ import annotations

from dataclasses import dataclass, field

from .json import DataClassJSONMixin

SESSION_COOKIE_NAME = "sid"


@dataclass(frozen=True)
class SessionContext(DataClassJSONMixin):
    """Authenticated session on the gateway.

    The gateway may drop the session at any time, nothing here tracks expiry.
    """

    #: Session cookie value
    sid: str = field(repr=False)
    #: CSRF token required by every mutating request
    token: str = field(repr=False)

    @property
    def cookies(self) -> dict[str, str]:
        """Cookies to send with requests made in this session."""
        return {SESSION_COOKIE_NAME: self.sid}
