"""HMAC-SHA1 payload signatures for the ``X-Signature`` header."""

from __future__ import annotations

import functools
import hashlib
import hmac
from typing import Union

from cqreport.core.errors import ConfigurationError


class Signer:
    """Signs report bodies with a shared secret.

    The keyed HMAC state is built once; every signature starts from a copy
    of it, so a single instance can be shared by concurrent dispatches.
    """

    prefix = "sha1="

    def __init__(self, secret: str) -> None:
        try:
            key = secret.encode("utf-8")
            self._mac = hmac.new(key, digestmod=hashlib.sha1)
        except (AttributeError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Unable to initialise HMAC-SHA1 signer: {exc}") from exc

    def sign(self, body: Union[bytes, str]) -> str:
        if isinstance(body, str):
            body = body.encode("utf-8")
        mac = self._mac.copy()
        mac.update(body)
        return self.prefix + mac.hexdigest()


@functools.lru_cache(maxsize=32)
def _signer_for(secret: str) -> Signer:
    return Signer(secret)


def sign(secret: str, body: Union[bytes, str]) -> str:
    """Return ``sha1=<hex>`` for ``body`` keyed by ``secret``."""
    return _signer_for(secret).sign(body)
