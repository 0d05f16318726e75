from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Contig:
    name: str
    seq: str

    # Fragment names in assembly order, each followed by '+' or '-' for the
    # strand it was used on.
    layout: Tuple[str, ...] = ()

    @property
    def description(self) -> str:
        return f'length={len(self.seq)} fragments={",".join(self.layout)}'
