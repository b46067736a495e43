"""PBKDF2 (RFC 2898) with HMAC-SHA-1/256/384/512 as the PRF."""
from pbkdf2hmac.derive import pbkdf2_hmac, pbkdf2_hmac_async
from pbkdf2hmac.errors import (
    Cancelled,
    DerivedKeyTooLong,
    InvalidAlgorithm,
    InvalidInputType,
    InvalidIterationCount,
    InvalidLength,
    Pbkdf2Error,
    UnsupportedAlgorithm,
)
from pbkdf2hmac.hashalgs import DEFAULT_HASH, HASHALGS, HashAlg

__all__ = [
    'pbkdf2_hmac',
    'pbkdf2_hmac_async',
    'Pbkdf2Error',
    'InvalidAlgorithm',
    'UnsupportedAlgorithm',
    'InvalidIterationCount',
    'InvalidLength',
    'DerivedKeyTooLong',
    'InvalidInputType',
    'Cancelled',
    'HASHALGS',
    'HashAlg',
    'DEFAULT_HASH',
]

__version__ = '1.0.0'
