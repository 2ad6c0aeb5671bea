from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class HashEntry:
    """
    One occupied slot of the hash table.

    `index` always equals the entry's position in the slot list; the
    table replaces the whole entry whenever it writes a slot, so the two
    cannot drift apart.
    """

    key:   str
    value: str
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "value": self.value, "index": self.index}
