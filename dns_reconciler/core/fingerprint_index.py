"""
Fingerprint Index - multi-map from a record key to the records sharing it.
"""

from typing import Callable, Dict, Iterable, Iterator, List

from .records import DnsRecord
from ..utils.canonical import conflict_key, record_fingerprint

KeyFunc = Callable[[DnsRecord], str]


class FingerprintIndex:
    """Groups records by key, keeping duplicates instead of collapsing them."""

    def __init__(self, records: Iterable[DnsRecord], key: KeyFunc):
        self._key = key
        self._buckets: Dict[str, List[DnsRecord]] = {}
        for record in records:
            self._buckets.setdefault(key(record), []).append(record)

    @classmethod
    def by_fingerprint(cls, records: Iterable[DnsRecord], include_ttl: bool = False) -> "FingerprintIndex":
        return cls(records, lambda record: record_fingerprint(record, include_ttl))

    @classmethod
    def by_name_and_type(cls, records: Iterable[DnsRecord]) -> "FingerprintIndex":
        return cls(records, conflict_key)

    def key_for(self, record: DnsRecord) -> str:
        return self._key(record)

    def get(self, key: str) -> List[DnsRecord]:
        return list(self._buckets.get(key, []))

    def matches(self, record: DnsRecord) -> List[DnsRecord]:
        """Indexed records that share ``record``'s key."""
        return self.get(self._key(record))

    def duplicates(self) -> Dict[str, List[DnsRecord]]:
        return {key: list(bucket) for key, bucket in self._buckets.items() if len(bucket) > 1}

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)


def build_index(records: Iterable[DnsRecord], include_ttl: bool = False) -> Dict[str, List[DnsRecord]]:
    """Plain-dict form of ``FingerprintIndex.by_fingerprint``."""
    index = FingerprintIndex.by_fingerprint(records, include_ttl)
    return {key: index.get(key) for key in index}
