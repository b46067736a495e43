# A PBKDF2 implementation on top of the HMAC PRF in pbkdf2hmac.prf. See
# RFC 2898 section 5.2 for details. Basically, it derives a key from a
# password and salt.

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from struct import pack

from pbkdf2hmac.errors import Cancelled, DerivedKeyTooLong, InvalidIterationCount, InvalidLength
from pbkdf2hmac.hashalgs import HashAlg, get_hash_alg
from pbkdf2hmac.prf import PRF, new_prf

logger = logging.getLogger(__name__)

# the block index is a four-octet integer
MAX_BLOCKS = 2**32 - 1


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_iterations(itercount) -> None:
    if not _is_int(itercount) or itercount <= 0:
        raise InvalidIterationCount(f'c must be a positive integer, got {itercount!r}')


def check_keylen(keylen, alg: HashAlg) -> None:
    if not _is_int(keylen) or keylen <= 0:
        raise InvalidLength(f'dkLen must be a positive integer, got {keylen!r}')
    if keylen >= MAX_BLOCKS * alg.output_length:
        raise DerivedKeyTooLong(
            f'dkLen must be < (2 ** 32 - 1) * hLen = {MAX_BLOCKS * alg.output_length}'
        )


def block_layout(keylen: int, alg: HashAlg):
    """Return (l, r): the number of hLen blocks and the octets used from the last one."""
    hlen = alg.output_length
    n_blocks = -(-keylen // hlen)
    return n_blocks, keylen - (n_blocks - 1) * hlen


def hmac_key(password: bytes, alg: HashAlg) -> bytes:
    """Key used for every HMAC of the derivation.

    An empty password is replaced by block_size zero octets. This is not
    part of RFC 2898: some HMAC primitives refuse empty keys. HMAC pads
    short keys with zeros up to the block size, so the derived key is the
    same as keying with the empty string.
    """
    if len(password) == 0:
        return bytes(alg.block_size)
    return password


class _StopFlag:
    'Caller cancellation plus an internal flag raised when a sibling block fails.'

    def __init__(self, cancel=None):
        self._cancel = cancel
        self._abort = threading.Event()

    def abort(self):
        self._abort.set()

    def is_set(self) -> bool:
        return self._abort.is_set() or (self._cancel is not None and self._cancel.is_set())


def pbkdf2(password: bytes, salt: bytes, itercount: int, keylen: int, alg='SHA-256', workers: int = 1, cancel=None) -> bytes:
    """Derive a key using PBKDF2 with HMAC as the PRF.

    password and salt must already be bytes; see pbkdf2hmac.bytesource for
    the conversion of other inputs. `cancel` is any object with an
    is_set() method (threading.Event); it is polled before each HMAC
    iteration and Cancelled is raised as soon as it is set.
    """
    alg = get_hash_alg(alg)
    check_iterations(itercount)
    check_keylen(keylen, alg)

    n_blocks, last_len = block_layout(keylen, alg)
    prf = new_prf(hmac_key(password, alg), alg)
    logger.debug('pbkdf2: %s, c=%d, dkLen=%d, l=%d, r=%d', alg.name, itercount, keylen, n_blocks, last_len)

    if workers is not None and workers > 1 and n_blocks > 1:
        T = _parallel_blocks(prf, salt, itercount, n_blocks, workers, cancel)
    else:
        T = [_pbkdf2_F(prf, salt, itercount, i, cancel) for i in range(1, n_blocks + 1)]

    T[-1] = T[-1][:last_len]
    return _concat(*T)


def _parallel_blocks(prf: PRF, salt: bytes, itercount: int, n_blocks: int, workers: int, cancel):
    stop = _StopFlag(cancel)

    def run(blocknum):
        try:
            return _pbkdf2_F(prf, salt, itercount, blocknum, stop)
        except Exception:
            stop.abort()
            raise

    with ThreadPoolExecutor(max_workers=min(workers, n_blocks)) as executor:
        futures = [executor.submit(run, i) for i in range(1, n_blocks + 1)]

    errors = [f.exception() for f in futures if f.exception() is not None]
    if errors:
        # blocks stopped by a failing sibling report Cancelled; surface the root cause
        root = [e for e in errors if not isinstance(e, Cancelled)]
        raise (root or errors)[0]
    return [f.result() for f in futures]


def _concat(*arrs: bytes) -> bytes:
    if len(arrs) == 0:
        raise ValueError('cannot concat no arrays')
    return b''.join(arrs)


def _xor_bytes(a: bytes, b: bytes) -> bytes:
    if len(a) != len(b):
        raise ValueError('_xor_bytes(): lengths differ')
    return (int.from_bytes(a, 'big') ^ int.from_bytes(b, 'big')).to_bytes(len(a), 'big')


def _int(blocknum: int) -> bytes:
    # INT(i): four octets, most significant first
    return pack('>I', blocknum)


def _pbkdf2_F(prf: PRF, salt: bytes, itercount: int, blocknum: int, cancel=None) -> bytes:
    if cancel is not None and cancel.is_set():
        raise Cancelled('derivation cancelled')
    U = prf(_concat(salt, _int(blocknum)))
    T = U

    for _ in range(2, itercount + 1):
        if cancel is not None and cancel.is_set():
            raise Cancelled('derivation cancelled')
        U = prf(U)
        T = _xor_bytes(T, U)

    return T
