from dataclasses import dataclass, replace
from typing import Tuple, Union

from Bio.Seq import reverse_complement


# One or two signed ints, see Fragment.substr_seq().
Offset = Union[Tuple[int], Tuple[int, int]]


def negate_offset(offset: Offset) -> Offset:
    """ Mirror an offset so it counts from the opposite end. """
    return tuple(-x for x in offset)  # type: ignore[return-value]


@dataclass
class Fragment:
    """
    One input sequence, with its current orientation.

    `is_reversed` is True after an odd number of reverse complements, so
    `seq` is then the reverse complement of the record that was loaded.
    """

    name: str
    seq: str
    is_reversed: bool = False

    def __len__(self) -> int:
        return len(self.seq)

    def copy(self) -> 'Fragment':
        return replace(self)

    def reverse_complement(self) -> None:
        self.seq = reverse_complement(self.seq)
        self.is_reversed = not self.is_reversed

    def substr_seq(self, offset: Offset) -> 'Fragment':
        """ Extract a piece of this fragment.

        The sign of the last element picks the end to count from.
        (n,): the first n bases if n >= 0, or the last -n bases.
        (start, length): length bases beginning start bases after the 5'
            end, or, with a negative length, -length bases ending -start
            bases before the 3' end.
        """
        size = len(self.seq)
        if len(offset) == 1:
            n, = offset
            if n >= 0:
                start, end = 0, n
            else:
                start, end = size + n, size
        elif len(offset) == 2:
            skip, length = offset
            skip = abs(skip)
            if length >= 0:
                start, end = skip, skip + length
            else:
                start, end = size - skip + length, size - skip
        else:
            raise ValueError(f'Offset must have one or two elements: {offset!r}.')
        start = min(max(start, 0), size)
        end = min(max(end, start), size)
        return Fragment(self.name, self.seq[start:end], self.is_reversed)

    def concat(self, other: 'Fragment') -> 'Fragment':
        return Fragment(self.name, self.seq + other.seq, self.is_reversed)

    @property
    def strand(self) -> str:
        return '-' if self.is_reversed else '+'
