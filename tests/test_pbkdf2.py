import hashlib
import threading

import pytest

from pbkdf2hmac import (
    HASHALGS,
    Cancelled,
    DerivedKeyTooLong,
    InvalidAlgorithm,
    InvalidIterationCount,
    InvalidLength,
)
from pbkdf2hmac.pbkdf2 import (
    _concat,
    _int,
    _pbkdf2_F,
    _xor_bytes,
    block_layout,
    hmac_key,
    pbkdf2,
)
from pbkdf2hmac.prf import new_prf
from pbkdf2hmac.vectors import KNOWN_VECTORS


def _ref(P, S, c, dk_len, name='SHA-256'):
    return hashlib.pbkdf2_hmac(HASHALGS[name].hashlib_name, P, S, c, dk_len)


class TestPBKDF2:
    @pytest.mark.parametrize(
        'vector',
        [v for v in KNOWN_VECTORS if v.error is None],
        ids=lambda v: f'{v.hash}-c{v.c}-{v.dkLen}',
    )
    def test_known_vectors(self, vector):
        P = vector.P.encode('utf-8') if isinstance(vector.P, str) else vector.P
        S = vector.S.encode('utf-8') if isinstance(vector.S, str) else vector.S
        assert pbkdf2(P, S, vector.c, vector.dkLen, vector.hash).hex() == vector.output

    @pytest.mark.parametrize('name', list(HASHALGS))
    def test_matches_hashlib(self, name):
        P, S = b'pass' * 50, bytes(range(16))
        for dk_len in (1, 20, 33, 100, 129):
            assert pbkdf2(P, S, 7, dk_len, name) == _ref(P, S, 7, dk_len, name)

    def test_length_exact(self):
        for dk_len in (1, 31, 32, 33, 64, 65, 200):
            assert len(pbkdf2(b'p', b's', 2, dk_len)) == dk_len

    def test_deterministic(self):
        assert pbkdf2(b'test', b'salt', 100, 32) == pbkdf2(b'test', b'salt', 100, 32)

    def test_algorithm_sensitivity(self):
        outputs = {pbkdf2(b'password', b'salt', 2, 20, name) for name in HASHALGS}
        assert len(outputs) == len(HASHALGS)

    def test_truncation_is_a_prefix(self):
        # T_1 is the same whatever dkLen asks for
        full = pbkdf2(b'password', b'salt', 3, 64)
        assert pbkdf2(b'password', b'salt', 3, 33) == full[:33]
        assert pbkdf2(b'password', b'salt', 3, 32) == full[:32]


class TestBlocks:
    def test_layout_single_block(self):
        assert block_layout(32, HASHALGS['SHA-256']) == (1, 32)

    def test_layout_one_more_byte(self):
        assert block_layout(33, HASHALGS['SHA-256']) == (2, 1)

    def test_layout_sha1(self):
        assert block_layout(25, HASHALGS['SHA-1']) == (2, 5)
        assert block_layout(1, HASHALGS['SHA-1']) == (1, 1)

    def test_block_index_big_endian(self):
        assert _int(1) == b'\x00\x00\x00\x01'
        assert _int(0x01020304) == b'\x01\x02\x03\x04'
        assert _int(2**32 - 1) == b'\xff\xff\xff\xff'

    def test_blocks_are_independent(self):
        alg = HASHALGS['SHA-1']
        prf = new_prf(b'password', alg)
        blocks = {i: _pbkdf2_F(prf, b'salt', 5, i) for i in (4, 2, 3, 1)}
        dk = _concat(*(blocks[i] for i in range(1, 5)))
        assert dk == pbkdf2(b'password', b'salt', 5, 80, alg)

    def test_parallel_matches_sequential(self):
        for name in HASHALGS:
            seq = pbkdf2(b'password', b'salt', 50, 300, name)
            assert pbkdf2(b'password', b'salt', 50, 300, name, workers=4) == seq

    def test_xor(self):
        assert _xor_bytes(b'\x0f\xf0', b'\xff\xff') == b'\xf0\x0f'
        assert _xor_bytes(b'\x00\x01', b'\x00\x01') == b'\x00\x00'
        with pytest.raises(ValueError):
            _xor_bytes(b'\x00', b'\x00\x00')

    def test_concat(self):
        assert _concat(b'ab', b'', b'c') == b'abc'
        with pytest.raises(ValueError):
            _concat()


class TestEmptyPassword:
    def test_zero_key_substitution(self):
        assert hmac_key(b'', HASHALGS['SHA-256']) == bytes(64)
        assert hmac_key(b'', HASHALGS['SHA-512']) == bytes(128)
        assert hmac_key(b'pw', HASHALGS['SHA-512']) == b'pw'

    @pytest.mark.parametrize('name', list(HASHALGS))
    def test_empty_password(self, name):
        block = bytes(HASHALGS[name].block_size)
        dk = pbkdf2(b'', b'salt', 10, 40, name)
        assert dk == pbkdf2(block, b'salt', 10, 40, name)
        assert dk == _ref(b'', b'salt', 10, 40, name)

    def test_empty_salt(self):
        assert pbkdf2(b'password', b'', 3, 32) == _ref(b'password', b'', 3, 32)


class TestValidation:
    def test_unknown_hash(self):
        with pytest.raises(InvalidAlgorithm):
            pbkdf2(b'p', b's', 1, 32, 'MD5')

    @pytest.mark.parametrize('c', [0, -1, 1.0, '10', None, True])
    def test_bad_iterations(self, c):
        with pytest.raises(InvalidIterationCount):
            pbkdf2(b'p', b's', c, 32)

    @pytest.mark.parametrize('dk_len', [0, -5, 2.0, None, False])
    def test_bad_length(self, dk_len):
        with pytest.raises(InvalidLength):
            pbkdf2(b'p', b's', 1, dk_len)

    def test_too_long(self):
        with pytest.raises(DerivedKeyTooLong):
            pbkdf2(b'p', b's', 1, (2**32 - 1) * 20, 'SHA-1')
        assert issubclass(DerivedKeyTooLong, InvalidLength)


class TestCancellation:
    def test_cancelled_before_start(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(Cancelled):
            pbkdf2(b'password', b'salt', 10, 32, cancel=cancel)

    def test_cancelled_mid_derivation(self):
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        try:
            with pytest.raises(Cancelled):
                pbkdf2(b'password', b'salt', 10**9, 32, cancel=cancel)
        finally:
            timer.cancel()

    def test_cancelled_parallel(self):
        cancel = threading.Event()
        timer = threading.Timer(0.05, cancel.set)
        timer.start()
        try:
            with pytest.raises(Cancelled):
                pbkdf2(b'password', b'salt', 10**9, 128, workers=4, cancel=cancel)
        finally:
            timer.cancel()
