'''
**svcutils.rand**
--------------

A tiny deterministic Xorshift-128 generator. Not for cryptography; used
where a reproducible sequence from a numeric seed is wanted.
'''
from collections.abc import MutableSequence
from typing import Any

KX = 965120573
KY = 486042514
KZ = 563820594
KW = 75647390

_MASK = 0xFFFFFFFF


class SimpleRand:
    __slots__ = ('x', 'y', 'z', 'w')

    def __init__(self, seed: int) -> None:
        seed &= _MASK
        self.x: int = KX ^ seed
        self.y: int = KY ^ seed
        self.z: int = KZ
        self.w: int = KW

    def rand(self) -> int:
        '''
        Next unsigned 32 bit value.
        '''
        t = (self.x ^ (self.x << 11)) & _MASK
        self.x, self.y, self.z = self.y, self.z, self.w
        self.w = (self.w ^ (self.w >> 19) ^ t ^ (t >> 8)) & _MASK
        return self.w

    def rand_range(self, a: int, b: int) -> int:
        '''
        Value in ``[a, b]``, both ends included.
        '''
        if b < a:
            raise ValueError(f'empty range [{a}, {b}]')
        return a + self.rand() % (b - a + 1)

    def rand_float(self) -> float:
        '''
        Value in ``[0.0, 1.0]``.
        '''
        return self.rand() / _MASK

    def shuffle(self, items: MutableSequence[Any]) -> None:
        '''
        Fisher-Yates shuffle in place.
        '''
        for i in range(len(items) - 1, 0, -1):
            j = self.rand() % (i + 1)
            items[i], items[j] = items[j], items[i]
