import hashlib
import hmac as std_hmac

import pytest

from pbkdf2hmac import HASHALGS, HashAlg, UnsupportedAlgorithm
from pbkdf2hmac.prf import hmac, new_prf


class TestHMAC:
    @pytest.mark.parametrize('name', list(HASHALGS))
    def test_output_length(self, name):
        alg = HASHALGS[name]
        assert len(hmac(b'key', b'message', alg)) == alg.output_length

    def test_rfc4231_case_2(self):
        expected = '5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843'
        assert hmac(b'Jefe', b'what do ya want for nothing?', HASHALGS['SHA-256']).hex() == expected

    def test_keyed_prf_matches_one_shot(self):
        alg = HASHALGS['SHA-512']
        prf = new_prf(b'password', alg)
        for msg in (b'', b'salt\x00\x00\x00\x01', b'x' * 300):
            assert prf(msg) == hmac(b'password', msg, alg)
            assert prf(msg) == std_hmac.new(b'password', msg, hashlib.sha512).digest()

    def test_deterministic(self):
        alg = HASHALGS['SHA-1']
        assert hmac(b'k', b'm', alg) == hmac(b'k', b'm', alg)

    def test_unsupported(self):
        md5 = HashAlg('MD5', 16, 64)
        with pytest.raises(UnsupportedAlgorithm):
            hmac(b'k', b'm', md5)
        with pytest.raises(UnsupportedAlgorithm):
            new_prf(b'k', md5)

    def test_mismatched_table_entry(self):
        with pytest.raises(UnsupportedAlgorithm):
            new_prf(b'k', HashAlg('SHA-256', 20, 64))
