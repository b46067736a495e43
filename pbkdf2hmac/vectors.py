"""Known-answer vectors and a generator for random ones.

generate_vectors() draws a random password, salt and iteration count per
key length and computes the expected outputs with hashlib.pbkdf2_hmac, an
implementation independent of both engines in this package.
"""
import hashlib
import os
import random
from dataclasses import dataclass
from typing import Optional, Union

from pbkdf2hmac.errors import InvalidAlgorithm
from pbkdf2hmac.hashalgs import HASHALGS, get_hash_alg


@dataclass(frozen=True)
class Vector:
    P: Union[str, bytes]
    S: Union[str, bytes]
    c: int
    dkLen: int
    hash: str
    output: Optional[str] = None  # hex
    error: Optional[type] = None
    comment: str = ''

    def to_dict(self) -> dict:
        def enc(v):
            return v if isinstance(v, str) else v.hex()

        d = {
            'input': {'P': enc(self.P), 'S': enc(self.S), 'c': self.c, 'dkLen': self.dkLen, 'hash': self.hash},
        }
        if self.error is not None:
            d['error'] = self.error.__name__
        else:
            d['output'] = self.output
        if self.comment:
            d['comment'] = self.comment
        return d


KNOWN_VECTORS = (
    Vector(
        'passwd', 'salt', 1, 64, 'SHA-256',
        '55ac046e56e3089fec1691c22544b605f94185216dde0465e68b9d57c20dacbc'
        '49ca9cccf179b645991664b39d77ef317c71b845b1e30bd509112041d3a19783',
        comment='RFC 7914 11',
    ),
    Vector(
        'Password', 'NaCl', 80000, 64, 'SHA-256',
        '4ddcd8f60b98be21830cee5ef22701f9641a4418d04c0414aeff08876b34ab56'
        'a1d425a1225833549adb841b51c9b3176a272bdebba1d078478f62b397f33c8d',
        comment='RFC 7914 11',
    ),
    Vector(b'password', 'salt', 1, 32, 'SHA-256', '120fb6cffcf8b32c43e7225256c4f837a86548c92ccc35480805987cb70be17b'),
    Vector('password', b'salt', 4096, 32, 'SHA-256', 'c5e478d59288c841aa530db6845c4c8d962893a001ce4e11a4963873aa98134a'),
    Vector(
        b'', 'salt', 1024, 32, 'SHA-256',
        '9e83f279c040f2a11aa4a02b24c418f2d3cb39560c9627fa4f47e3bcc2897c3d',
        comment='empty password',
    ),
    Vector('password', 'salt', 2, 20, 'SHA-256', 'ae4d0c95af6b46d32d0adff928f06dd02a303f8e'),
    Vector(
        'passwordPASSWORDpassword', 'saltSALTsaltSALTsaltSALTsaltSALTsalt', 4096, 25, 'SHA-256',
        '348c89dbcbd32b2f32d814b8116e84cf2b17347ebc1800181c',
    ),
    Vector('password', 'salt', 1, 20, 'SHA-1', '0c60c80f961f0e71f3a9b524af6012062fe037a6', comment='RFC 6070'),
    Vector('password', 'salt', 2, 20, 'SHA-1', 'ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957', comment='RFC 6070'),
    Vector('password', 'salt', 4096, 20, 'SHA-1', '4b007901b765489abead49d926f721d065a429c1', comment='RFC 6070'),
    Vector(
        'passwordPASSWORDpassword', 'saltSALTsaltSALTsaltSALTsaltSALTsalt', 4096, 25, 'SHA-1',
        '3d2eec4fe41c849b80c8d83662c0e44a8b291a964cf2f07038',
        comment='RFC 6070',
    ),
    Vector('pass\0word', 'sa\0lt', 4096, 16, 'SHA-1', '56fa6aa75548099dcc37d7f03425e0c3', comment='RFC 6070'),
    Vector('password', 'salt', 1000, 32, 'MD5', error=InvalidAlgorithm, comment='unsupported hash'),
)


def reference_pbkdf2(P: bytes, S: bytes, c: int, dkLen: int, hash: str) -> bytes:
    return hashlib.pbkdf2_hmac(get_hash_alg(hash).hashlib_name, P, S, c, dkLen)


def generate_vectors(dk_lens=(64, 128, 256, 1024, 2048, 3072), algorithms=tuple(HASHALGS), rng=None):
    """One random (P, S, c) per dkLen, derived with every algorithm."""
    rng = rng or random.SystemRandom()
    vectors = []
    for dk_len in dk_lens:
        P = os.urandom(rng.randint(1, 768))
        S = os.urandom(16)
        c = rng.randint(1, 512)
        for alg in algorithms:
            out = reference_pbkdf2(P, S, c, dk_len, alg)
            vectors.append(Vector(P, S, c, dk_len, alg, out.hex()))
    return vectors
