"""In-memory snapshot of accepted town records.

The snapshot is a read-only mapping that is only ever replaced as a whole,
so a reader holding a reference sees either the old or the new batch,
never a mix of both.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from townsync._constants import INFOGRAPHIC_TEMPLATE, INFOGRAPHIC_TOWNS
from townsync.config import RecordDefaults
from townsync.models.town import Language, TownInfo, TownRecord, is_link

Snapshot = Mapping[str, TownRecord]

_EMPTY: Snapshot = MappingProxyType({})


def build_snapshot(records: Iterable[TownRecord]) -> Snapshot:
    """Index *records* by name; a later duplicate replaces an earlier one."""
    return MappingProxyType({record.name: record for record in records})


def infographic_filename(name: str, language: Language | str = Language.ES) -> str | None:
    """File name of the security infographic for *name*, if one is shipped."""
    if name not in INFOGRAPHIC_TOWNS:
        return None
    suffix = "English" if Language(language) == Language.EN else "Final"
    return INFOGRAPHIC_TEMPLATE.format(name=name, suffix=suffix)


class SnapshotStore:
    """Holder of the current snapshot.

    Presentation code reads through :attr:`current`, :meth:`lookup` and
    :meth:`town_info`; only the sync controller calls :meth:`replace`.
    """

    def __init__(self, *, defaults: RecordDefaults | None = None) -> None:
        self._defaults = defaults or RecordDefaults()
        self._snapshot: Snapshot = _EMPTY

    @property
    def current(self) -> Snapshot:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def replace(self, records: Iterable[TownRecord]) -> Snapshot:
        snapshot = build_snapshot(records)
        self._snapshot = snapshot
        return snapshot

    def lookup(self, name: str) -> TownRecord | None:
        return self._snapshot.get(name.strip())

    def town_info(self, name: str, language: Language | str = Language.ES) -> TownInfo:
        """Describe *name* for an info panel in *language*.

        Municipalities without a row in the snapshot get the record defaults.
        """
        lang = Language(language)
        name = name.strip()
        record = self._snapshot.get(name)
        if record is None:
            defaults = self._defaults
            advisory = defaults.security_advisory_foreign if lang == Language.EN else defaults.security_advisory_local
            return TownInfo(
                name=name,
                language=lang,
                known=False,
                distance_label=defaults.distance_label,
                security_advisory=advisory,
                route_url=defaults.route_url,
                tourism_url=defaults.tourism_url,
                has_route_url=is_link(defaults.route_url),
                has_tourism_url=is_link(defaults.tourism_url),
                infographic=infographic_filename(name, lang),
            )

        return TownInfo(
            name=record.name,
            language=lang,
            known=True,
            distance_label=record.distance_label,
            security_advisory=record.security_advisory(lang),
            route_url=record.route_url,
            tourism_url=record.tourism_url,
            has_route_url=record.has_route_url,
            has_tourism_url=record.has_tourism_url,
            infographic=infographic_filename(record.name, lang),
        )
