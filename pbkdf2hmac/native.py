"""Library-provided PBKDF2 (pycryptodome).

Crypto.Protocol.KDF.PBKDF2 runs the iteration loop in C for the Crypto.Hash
modules that support it, so it is tried before the manual engine. The C
loop cannot be interrupted; derivations that must stay cancellable use the
manual engine instead.
"""
import functools
import logging

from Crypto.Hash import SHA1, SHA256, SHA384, SHA512
from Crypto.Protocol.KDF import PBKDF2

from pbkdf2hmac.errors import UnsupportedAlgorithm
from pbkdf2hmac.hashalgs import HASHALGS, HashAlg
from pbkdf2hmac.prf import hmac

logger = logging.getLogger(__name__)

_HASH_MODULES = {
    'SHA-1': SHA1,
    'SHA-256': SHA256,
    'SHA-384': SHA384,
    'SHA-512': SHA512,
}

# errors from the library that say nothing about the caller's input,
# e.g. a length it cannot allocate; the manual engine is tried instead
FALLBACK_ERRORS = (ValueError, OverflowError, MemoryError)


def hash_module(alg: HashAlg):
    return _HASH_MODULES.get(alg.name)


@functools.lru_cache(maxsize=None)
def _self_check(name: str) -> bool:
    # with c=1 and dkLen=hLen, PBKDF2 is T_1 = HMAC(P, S || INT(1))
    alg_module = _HASH_MODULES[name]
    try:
        dk = PBKDF2(b'password', b'salt', dkLen=alg_module.digest_size, count=1, hmac_hash_module=alg_module)
    except FALLBACK_ERRORS as e:
        logger.debug('library PBKDF2 self-check for %s failed: %s', name, e)
        return False
    return dk == hmac(b'password', b'salt\x00\x00\x00\x01', HASHALGS[name])


def available(alg: HashAlg) -> bool:
    """Capability probe: can the library derive with this algorithm?

    The library must have a hash module for it and a one-iteration
    derivation must agree with the HMAC adapter. The result is cached per
    algorithm.
    """
    if hash_module(alg) is None:
        return False
    ok = _self_check(alg.name)
    if not ok:
        logger.debug('library PBKDF2 disagrees with HMAC for %s', alg.name)
    return ok


def pbkdf2_native(password: bytes, salt: bytes, itercount: int, keylen: int, alg: HashAlg) -> bytes:
    module = hash_module(alg)
    if module is None:
        raise UnsupportedAlgorithm(f'no library PBKDF2 for {alg.name}')
    dk = PBKDF2(password, salt, dkLen=keylen, count=itercount, hmac_hash_module=module)
    if len(dk) != keylen:
        raise ValueError(f'library PBKDF2 returned {len(dk)} bytes, expected {keylen}')
    return dk
