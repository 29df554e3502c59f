# SecureRandomSource
# (unbiased random choices on top of backend.randombytes)
#

from . import backend
from .errors import RandomSourceError


class SecureRandomSource:

    """Cryptographically secure source of random indices.

    All choices are derived from `randombytes` by rejection sampling,
    so each index is uniform over its range.

    The default `randombytes` is picked by :mod:`kdguard.backend`
    (libsodium via PyNaCl, or os.urandom). Tests may pass any callable
    with the same signature.

    """

    def __init__(self, randombytes=None):
        self._randombytes = randombytes or backend.randombytes

    def randbytes(self, size: int) -> bytes:
        try:
            data = self._randombytes(size)
        except backend.MissingError:
            raise
        except Exception as e:
            raise RandomSourceError(f"Random source failed: {e}") from e
        if len(data) != size:
            raise RandomSourceError(f"Random source returned {len(data)} bytes, "
                                    f"expected {size}")
        return bytes(data)

    def randbelow(self, n: int) -> int:
        """Return uniform random integer in range [0, n)."""
        if n <= 0:
            raise ValueError("n must be positive")
        if n == 1:
            return 0
        nbits = (n - 1).bit_length()
        nbytes = (nbits + 7) // 8
        mask = (1 << nbits) - 1
        while True:
            value = int.from_bytes(self.randbytes(nbytes), 'big') & mask
            if value < n:
                return value

    def choice(self, seq):
        """Return uniformly chosen element of non-empty `seq`."""
        return seq[self.randbelow(len(seq))]

    def shuffle(self, items: list):
        """Shuffle `items` in place (Fisher-Yates)."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randbelow(i + 1)
            items[i], items[j] = items[j], items[i]
