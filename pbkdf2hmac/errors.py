class Pbkdf2Error(Exception):
    'Base class for every error raised by pbkdf2hmac.'


class InvalidAlgorithm(Pbkdf2Error, ValueError):
    pass


class UnsupportedAlgorithm(Pbkdf2Error, ValueError):
    'Raised by the HMAC adapter when it has no primitive for the algorithm.'


class InvalidIterationCount(Pbkdf2Error, ValueError):
    pass


class InvalidLength(Pbkdf2Error, ValueError):
    pass


class DerivedKeyTooLong(InvalidLength):
    'dkLen reached (2^32 - 1) * hLen, RFC 2898 5.2 step 1.'


class InvalidInputType(Pbkdf2Error, TypeError):
    pass


class Cancelled(Pbkdf2Error):
    'The derivation was abandoned; no key material is returned.'
