"""HMAC pseudorandom function used by the manual PBKDF2 engine.

The hash primitives come from the standard library; this module only picks
the digest for a HashAlg and keys it.
"""
import hashlib
import hmac as _hmac
from types import MappingProxyType

from pbkdf2hmac.errors import UnsupportedAlgorithm
from pbkdf2hmac.hashalgs import HashAlg

_DIGESTS = MappingProxyType(
    {
        'SHA-1': hashlib.sha1,
        'SHA-256': hashlib.sha256,
        'SHA-384': hashlib.sha384,
        'SHA-512': hashlib.sha512,
    }
)


def _digestmod(alg: HashAlg):
    try:
        return _DIGESTS[alg.name]
    except (KeyError, AttributeError):
        raise UnsupportedAlgorithm(f'no HMAC primitive for {alg!r}') from None


class PRF:
    """HMAC keyed once with the password, applied to many messages.

    The key schedule (ipad/opad blocks) is computed in __init__ and each
    call works on a copy of it, the same trick hmac.HMAC.copy() exists for.
    """

    def __init__(self, key: bytes, alg: HashAlg):
        self.alg = alg
        self._base = _hmac.new(key, b'', _digestmod(alg))
        if self._base.digest_size != alg.output_length:
            raise UnsupportedAlgorithm(
                f'{alg.name} primitive returned {self._base.digest_size}-byte digests, '
                f'expected {alg.output_length}'
            )

    def __call__(self, message: bytes) -> bytes:
        hm = self._base.copy()
        hm.update(message)
        return hm.digest()


def new_prf(key: bytes, alg: HashAlg) -> PRF:
    return PRF(key, alg)


def hmac(key: bytes, message: bytes, alg: HashAlg) -> bytes:
    'One-shot HMAC; the digest is alg.output_length bytes.'
    return _hmac.new(key, message, _digestmod(alg)).digest()
