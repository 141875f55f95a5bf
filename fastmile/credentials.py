"""Credentials class for username / passwords."""

from __future__ import annotations

from dataclasses import dataclass, field

from .json import DataClassJSONMixin


@dataclass
class Credentials(DataClassJSONMixin):
    """Credentials for the gateway web admin account."""

    #: Username of the web admin account
    username: str = field(default="", repr=False)
    #: Password of the web admin account
    password: str = field(default="", repr=False)
