from dataclasses import dataclass
from types import MappingProxyType

from pbkdf2hmac.errors import InvalidAlgorithm


@dataclass(frozen=True)
class HashAlg:
    name: str
    output_length: int  # hLen, octets
    block_size: int

    @property
    def hashlib_name(self) -> str:
        # 'SHA-256' -> 'sha256'
        return self.name.lower().replace('-', '')


HASHALGS = MappingProxyType(
    {
        'SHA-1': HashAlg('SHA-1', 20, 64),
        'SHA-256': HashAlg('SHA-256', 32, 64),
        'SHA-384': HashAlg('SHA-384', 48, 128),
        'SHA-512': HashAlg('SHA-512', 64, 128),
    }
)

DEFAULT_HASH = 'SHA-256'


def get_hash_alg(name) -> HashAlg:
    if isinstance(name, HashAlg):
        name = name.name
    try:
        return HASHALGS[name]
    except (KeyError, TypeError):
        raise InvalidAlgorithm(
            f"Valid hash algorithm values are any of {','.join(HASHALGS)}, got {name!r}"
        ) from None
