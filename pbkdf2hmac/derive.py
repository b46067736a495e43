"""Public entry points: pbkdf2_hmac() and pbkdf2_hmac_async().

Both validate every parameter before any HMAC work starts, then run the
library PBKDF2 (pbkdf2hmac.native) and fall back to the manual engine
(pbkdf2hmac.pbkdf2) when the library cannot serve the request. The two
paths return identical bytes for identical inputs.
"""
import asyncio
import functools
import logging
import threading

from pbkdf2hmac import native
from pbkdf2hmac.bytesource import to_bytes
from pbkdf2hmac.errors import Cancelled, UnsupportedAlgorithm
from pbkdf2hmac.hashalgs import DEFAULT_HASH, get_hash_alg
from pbkdf2hmac.pbkdf2 import check_iterations, check_keylen, pbkdf2

logger = logging.getLogger(__name__)

ENGINES = ('auto', 'native', 'manual')


def _prepare(P, S, c, dkLen, hash, engine):
    # order matters: an unknown hash is reported whatever else is wrong
    alg = get_hash_alg(hash)
    check_iterations(c)
    check_keylen(dkLen, alg)
    password = to_bytes(P, 'P')
    salt = to_bytes(S, 'S')
    if engine not in ENGINES:
        raise ValueError(f'engine must be one of {", ".join(ENGINES)}, got {engine!r}')
    return password, salt, alg


def _derive(password, salt, c, dkLen, alg, engine, workers, cancel):
    if cancel is not None and cancel.is_set():
        raise Cancelled('derivation cancelled')

    if engine == 'auto' and cancel is not None:
        # the library loop cannot observe the token
        logger.debug('cancellable derivation, using manual engine')
    elif engine != 'manual':
        if native.available(alg):
            try:
                dk = native.pbkdf2_native(password, salt, c, dkLen, alg)
            except native.FALLBACK_ERRORS as e:
                if engine == 'native':
                    raise
                logger.debug('library PBKDF2 failed (%s: %s), using manual engine', type(e).__name__, e)
            else:
                if cancel is not None and cancel.is_set():
                    raise Cancelled('derivation cancelled')
                logger.debug('derived %d bytes with library PBKDF2 (%s)', dkLen, alg.name)
                return dk
        elif engine == 'native':
            raise UnsupportedAlgorithm(f'no library PBKDF2 for {alg.name}')
        else:
            logger.debug('no library PBKDF2 for %s, using manual engine', alg.name)

    dk = pbkdf2(password, salt, c, dkLen, alg, workers=workers, cancel=cancel)
    logger.debug('derived %d bytes with manual engine (%s)', dkLen, alg.name)
    return dk


def pbkdf2_hmac(P, S, c: int, dkLen: int, hash: str = DEFAULT_HASH, *, engine: str = 'auto', workers: int = 1, cancel=None) -> bytes:
    """Derive a key using PBKDF2 (RFC 2898) with HMAC-`hash` as the PRF.

    P and S may be str (UTF-8 encoded), bytes, or any bytes-like buffer.
    Returns exactly dkLen bytes.

    engine: 'auto' tries the library PBKDF2 then the manual engine,
            'native' uses only the library, 'manual' only the manual engine.
    workers: threads used to compute blocks in parallel (manual engine).
    cancel: object with is_set(); when set, Cancelled is raised and no
            key material is returned. With engine='auto' a cancel token
            selects the manual engine, which polls it every iteration;
            engine='native' only checks it before and after the call.
    """
    password, salt, alg = _prepare(P, S, c, dkLen, hash, engine)
    return _derive(password, salt, c, dkLen, alg, engine, workers, cancel)


def pbkdf2_hmac_async(P, S, c: int, dkLen: int, hash: str = DEFAULT_HASH, *, engine: str = 'auto', workers: int = 1, cancel=None):
    """Same as pbkdf2_hmac() but returns a coroutine.

    Arguments are checked here, before the coroutine exists, so invalid
    input raises at the call site. The derivation itself runs in the event
    loop's default executor. With engine='auto' or 'manual' it runs on the
    manual engine, and cancelling the awaiting task stops it at the next
    HMAC iteration. engine='native' cannot be interrupted: a cancelled
    task stops waiting, but the executor thread runs to completion and
    asyncio.run() waits for it on shutdown.
    """
    password, salt, alg = _prepare(P, S, c, dkLen, hash, engine)
    return _derive_async(password, salt, c, dkLen, alg, engine, workers, cancel)


async def _derive_async(password, salt, c, dkLen, alg, engine, workers, cancel):
    stop = threading.Event()
    if cancel is not None and cancel.is_set():
        raise Cancelled('derivation cancelled')

    loop = asyncio.get_running_loop()
    job = functools.partial(_derive, password, salt, c, dkLen, alg, engine, workers, _Either(stop, cancel))
    try:
        return await loop.run_in_executor(None, job)
    except asyncio.CancelledError:
        stop.set()
        raise


class _Either:
    def __init__(self, *events):
        self._events = [e for e in events if e is not None]

    def is_set(self) -> bool:
        return any(e.is_set() for e in self._events)
