"""Fixed width selection bit vector.

A selection mask is stored as two unsigned 64-bit words. Word 0 holds bits
0-63 and word 1 holds bits 64-127.
"""

from typing import Iterable, Sequence

WORD_BITS = 64
NUM_WORDS = 2
NUM_BITS = WORD_BITS * NUM_WORDS

_WORD_MAX = (1 << WORD_BITS) - 1


def _check_word(word: int) -> int:
    if not 0 <= word <= _WORD_MAX:
        raise ValueError(f"Mask word must be an unsigned 64-bit value, got {word!r}")
    return word


class SelectionBits:
    def __init__(self, words: Sequence[int] | None = None):
        self._words = [0] * NUM_WORDS
        if words is not None:
            if len(words) != NUM_WORDS:
                raise ValueError(f"Expected {NUM_WORDS} words, got {len(words)}")
            self._words = [_check_word(w) for w in words]

    @classmethod
    def from_words(cls, words: Sequence[int]) -> "SelectionBits":
        return cls(words)

    @classmethod
    def from_bits(cls, bits: Iterable[int]) -> "SelectionBits":
        result = cls()
        for bit in bits:
            result.set(bit)
        return result

    @staticmethod
    def _locate(bit: int) -> tuple[int, int]:
        if not 0 <= bit < NUM_BITS:
            raise IndexError(f"Bit {bit} out of range [0, {NUM_BITS})")
        return divmod(bit, WORD_BITS)

    def test(self, bit: int) -> bool:
        word, offset = self._locate(bit)
        return bool(self._words[word] >> offset & 1)

    def set(self, bit: int) -> None:
        word, offset = self._locate(bit)
        self._words[word] |= 1 << offset

    def set_bits(self) -> list[int]:
        """Positions of all set bits, ascending."""
        bits = []
        for word_index, word in enumerate(self._words):
            for offset in range(WORD_BITS):
                if word >> offset & 1:
                    bits.append(word_index * WORD_BITS + offset)
        return bits

    def to_words(self) -> tuple[int, int]:
        return self._words[0], self._words[1]

    def any(self) -> bool:
        return any(self._words)

    def __bool__(self) -> bool:
        return self.any()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionBits):
            return NotImplemented
        return self._words == other._words

    def __hash__(self) -> int:
        return hash(tuple(self._words))

    def __repr__(self) -> str:
        return f"SelectionBits({self.set_bits()})"
