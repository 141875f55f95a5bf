"""Implementation of the gateway web app login.

The login never sends the password. It runs in three requests against
``/login_web_app.cgi``:

1. ``?nonce`` returns a one time nonce, a random key and an iteration count.
2. ``?salt`` with a hash of the username and nonce returns the account salt.
3. ``?salt`` again with the challenge response derived from the salted and
   iterated password hash returns the session id and csrf token.

Every attempt starts from a fresh nonce, a failed step is never retried.
"""

from __future__ import annotations

import base64
import logging
import secrets
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any
from urllib.parse import urlencode

from mashumaro import field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField
from yarl import URL

from .credentials import Credentials
from .exceptions import (
    AuthenticationFailed,
    DecodeError,
    FastmileException,
)
from .gatewayconfig import GatewayConfig
from .hashing import base64url_escape, hex_hash, paired_hash, paired_hash_url_safe
from .httpclient import HttpClient
from .json import DataClassJSONMixin
from .session import SessionContext

_LOGGER = logging.getLogger(__name__)

SESSION_KEY_BYTES = 16


def _check_strings(payload: dict[str, Any], *keys: str) -> dict[str, Any]:
    for key in keys:
        if key in payload and not isinstance(payload[key], str):
            raise TypeError(f"{key} must be a string, got {payload[key]!r}")
    return payload


class AuthState(Enum):
    """Enum for the login state of a single attempt."""

    UNAUTHENTICATED = auto()  # Nonce needed
    NONCE_OBTAINED = auto()  # Salt needed
    SALT_OBTAINED = auto()  # Challenge response needed
    AUTHENTICATED = auto()  # Session established


@dataclass(frozen=True)
class NonceInfo(DataClassJSONMixin):
    """Nonce issued by the gateway for one login attempt."""

    class Config(BaseConfig):
        """Serialization config."""

        serialize_by_alias = True

    nonce: str
    random_key: str = field(metadata=field_options(alias="randomKey"))
    iterations: int

    @classmethod
    def __pre_deserialize__(cls, d: dict[str, Any]) -> dict[str, Any]:
        return _check_strings(d, "nonce", "randomKey")

    def __post_init__(self) -> None:
        iterations = int(self.iterations)
        if iterations < 0:
            raise ValueError(f"iterations must not be negative: {iterations}")
        object.__setattr__(self, "iterations", iterations)


@dataclass(frozen=True)
class SaltInfo(DataClassJSONMixin):
    """Password salt of the account."""

    alati: str

    @classmethod
    def __pre_deserialize__(cls, d: dict[str, Any]) -> dict[str, Any]:
        return _check_strings(d, "alati")


@dataclass(frozen=True)
class SaltRequest:
    """Form body asking for the account salt."""

    userhash: str
    nonce: str

    def encode(self) -> bytes:
        """Return the form encoded body."""
        return urlencode({"userhash": self.userhash, "nonce": self.nonce}).encode()


@dataclass(frozen=True)
class ChallengeRequest:
    """Form body carrying the challenge response."""

    userhash: str
    random_key_hash: str
    response: str
    nonce: str
    enckey: str
    enciv: str

    def encode(self) -> bytes:
        """Return the form encoded body."""
        return urlencode(
            {
                "userhash": self.userhash,
                "RandomKeyhash": self.random_key_hash,
                "response": self.response,
                "nonce": self.nonce,
                "enckey": self.enckey,
                "enciv": self.enciv,
            }
        ).encode()


def hash_password(salt: str, password: str, iterations: int) -> str:
    """Return the salted password hashed iterations times.

    With zero iterations the salted password is returned unhashed.
    """
    if iterations < 1:
        return salt + password
    hashed = hex_hash(salt + password)
    for _ in range(iterations - 1):
        hashed = hex_hash(hashed)
    return hashed


def generate_response(
    username: str, password: str, nonce_info: NonceInfo, salt_info: SaltInfo
) -> str:
    """Generate the challenge response for the supplied credentials."""
    hashed = hash_password(salt_info.alati, password, nonce_info.iterations)
    return paired_hash_url_safe(
        paired_hash(username, hashed.lower()), nonce_info.nonce
    )


def generate_session_key() -> tuple[str, str]:
    """Return a fresh escaped encryption key and iv.

    The gateway requires both with the challenge, nothing is encrypted
    with them afterwards.
    """
    key = base64.b64encode(secrets.token_bytes(SESSION_KEY_BYTES)).decode()
    iv = base64.b64encode(secrets.token_bytes(SESSION_KEY_BYTES)).decode()
    return base64url_escape(key), base64url_escape(iv)


class WebAppAuth:
    """Runs the nonce, salt and challenge login against a gateway."""

    LOGIN_PATH = "/login_web_app.cgi"
    FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}

    def __init__(
        self,
        *,
        config: GatewayConfig,
        http_client: HttpClient | None = None,
    ) -> None:
        self._config = config
        self._host = config.host
        self._credentials = config.credentials
        self._http_client = http_client or HttpClient(config)
        self._state = AuthState.UNAUTHENTICATED

        self._nonce_url = URL(f"http://{self._host}{self.LOGIN_PATH}?nonce")
        self._salt_url = URL(f"http://{self._host}{self.LOGIN_PATH}?salt")

    @property
    def state(self) -> AuthState:
        """Return the state of the current login attempt."""
        return self._state

    def _parse(self, model: Any, payload: Any, step: str) -> Any:
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Unexpected {step} response from {self._host}: {payload!r}"
            )
        try:
            return model.from_dict(payload)
        except (MissingField, InvalidFieldValue, TypeError, ValueError) as ex:
            raise DecodeError(
                f"Unable to parse {step} response from {self._host}: {ex}"
            ) from ex

    async def get_nonce(self) -> NonceInfo:
        """Request a fresh nonce from the gateway."""
        self._state = AuthState.UNAUTHENTICATED
        _, resp_dict = await self._http_client.get(self._nonce_url)
        nonce_info: NonceInfo = self._parse(NonceInfo, resp_dict, "nonce")
        _LOGGER.debug(
            "%s issued nonce with %s iterations", self._host, nonce_info.iterations
        )
        self._state = AuthState.NONCE_OBTAINED
        return nonce_info

    async def get_salt(self, username: str, nonce_info: NonceInfo) -> SaltInfo:
        """Request the salt of username, proven with the nonce."""
        request = SaltRequest(
            userhash=paired_hash_url_safe(username, nonce_info.nonce),
            nonce=base64url_escape(nonce_info.nonce),
        )
        _, resp_dict = await self._http_client.post(
            self._salt_url, data=request.encode(), headers=self.FORM_HEADERS
        )
        salt_info: SaltInfo = self._parse(SaltInfo, resp_dict, "salt")
        _LOGGER.debug("%s issued salt", self._host)
        self._state = AuthState.SALT_OBTAINED
        return salt_info

    async def perform_login(
        self, credentials: Credentials, nonce_info: NonceInfo, salt_info: SaltInfo
    ) -> SessionContext:
        """Send the challenge response and return the new session."""
        username = credentials.username
        enckey, enciv = generate_session_key()
        request = ChallengeRequest(
            userhash=paired_hash_url_safe(username, nonce_info.nonce),
            random_key_hash=paired_hash_url_safe(
                nonce_info.random_key, nonce_info.nonce
            ),
            response=generate_response(
                username, credentials.password, nonce_info, salt_info
            ),
            nonce=base64url_escape(nonce_info.nonce),
            enckey=enckey,
            enciv=enciv,
        )
        status_code, resp_dict = await self._http_client.post(
            self._salt_url, data=request.encode(), headers=self.FORM_HEADERS
        )
        if not isinstance(resp_dict, dict):
            raise DecodeError(
                f"Unexpected login response from {self._host}: {resp_dict!r}"
            )
        if not (sid := resp_dict.get("sid")):
            self._state = AuthState.UNAUTHENTICATED
            raise AuthenticationFailed(
                f"Login rejected by {self._host} (status {status_code})",
                response=resp_dict,
            )
        if not (token := resp_dict.get("token")):
            _LOGGER.warning("%s returned a session without a csrf token", self._host)

        self._state = AuthState.AUTHENTICATED
        _LOGGER.debug("Login to %s complete", self._host)
        return SessionContext(sid=str(sid), token=str(token or ""))

    async def authenticate(
        self, credentials: Credentials | None = None
    ) -> SessionContext:
        """Run a complete login attempt and return the session."""
        credentials = credentials or self._credentials
        if not credentials or not credentials.username:
            raise FastmileException(
                f"Credentials are required to log in to {self._host}"
            )

        _LOGGER.debug("Will perform login to %s...", self._host)
        try:
            nonce_info = await self.get_nonce()
            salt_info = await self.get_salt(credentials.username, nonce_info)
            return await self.perform_login(credentials, nonce_info, salt_info)
        except FastmileException:
            self._state = AuthState.UNAUTHENTICATED
            raise

    async def close(self) -> None:
        """Close the http client and reset internal state."""
        self._state = AuthState.UNAUTHENTICATED
        await self._http_client.close()
