from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from mopetoo_admin.app.kinds import KINDS, RecordId, get_kind
from mopetoo_admin.app.models import AdminStats, Record

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]

ERROR_TOPIC = "error"
ALL_TOPIC = "*"


@dataclass
class KindState:
    items: list[Record] = field(default_factory=list)
    total: int = 0
    pending: int = 0
    selected: Record | None = None

    @property
    def is_loading(self) -> bool:
        return self.pending > 0

    def clear(self) -> None:
        self.items = []
        self.total = 0
        self.pending = 0
        self.selected = None


class ResourceStore:
    """Session-wide admin state: one slice per kind plus the shared error slot.

    Every method is synchronous and never touches the network; the facade is
    the only writer in normal operation.
    """

    def __init__(self) -> None:
        self._states: dict[str, KindState] = {name: KindState() for name in KINDS}
        self._listeners: list[Listener] = []
        self.stats: AdminStats | None = None
        self.error: str | None = None

    # read side

    def state(self, kind: str) -> KindState:
        get_kind(kind)
        return self._states[kind]

    def items(self, kind: str) -> list[Record]:
        return self.state(kind).items

    def total(self, kind: str) -> int:
        return self.state(kind).total

    def is_loading(self, kind: str) -> bool:
        return self.state(kind).is_loading

    def selected(self, kind: str) -> Record | None:
        return self.state(kind).selected

    def has_items(self, kind: str) -> bool:
        return bool(self.state(kind).items)

    def find(self, kind: str, record_id: RecordId) -> Record | None:
        index = self._index_of(kind, record_id)
        return None if index is None else self.state(kind).items[index]

    # mutations

    def set_collection(self, kind: str, records: Iterable[Record] | None, total: int | None) -> None:
        state = self.state(kind)
        state.items = _safe_records(records)
        state.total = _safe_total(total)
        self._notify(kind)

    def update_record(self, kind: str, record_id: RecordId, patch: Mapping[str, Any] | None) -> bool:
        index = self._index_of(kind, record_id)
        if index is None:
            return False
        id_field = get_kind(kind).id_field
        changes = {key: value for key, value in patch.items() if key != id_field} if isinstance(patch, Mapping) else {}
        state = self.state(kind)
        state.items[index] = {**state.items[index], **changes}
        self._notify(kind)
        return True

    def remove_record(self, kind: str, record_id: RecordId) -> bool:
        index = self._index_of(kind, record_id)
        if index is None:
            return False
        state = self.state(kind)
        del state.items[index]
        state.total = max(0, state.total - 1)
        self._notify(kind)
        return True

    def set_loading(self, kind: str, value: bool) -> None:
        self.state(kind).pending = 1 if value else 0
        self._notify(kind)

    def begin_request(self, kind: str) -> None:
        self.state(kind).pending += 1
        self._notify(kind)

    def end_request(self, kind: str) -> None:
        state = self.state(kind)
        state.pending = max(0, state.pending - 1)
        self._notify(kind)

    def set_selected(self, kind: str, record: Record | None) -> None:
        self.state(kind).selected = dict(record) if record is not None else None
        self._notify(kind)

    def clear_selected(self, kind: str) -> None:
        self.set_selected(kind, None)

    def set_stats(self, stats: AdminStats | None) -> None:
        self.stats = stats
        self._notify("stats")

    def set_error(self, message: str | None) -> None:
        self.error = message
        self._notify(ERROR_TOPIC)

    def clear_all(self) -> None:
        for state in self._states.values():
            state.clear()
        self.stats = None
        self.error = None
        self._notify(ALL_TOPIC)

    # listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, topic: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(topic)
            except Exception:
                logger.exception("admin store listener failed for %s", topic)

    def _index_of(self, kind: str, record_id: RecordId) -> int | None:
        id_field = get_kind(kind).id_field
        for index, record in enumerate(self.state(kind).items):
            if record.get(id_field) == record_id:
                return index
        return None


def _safe_records(records: Any) -> list[Record]:
    # strings and mappings iterate, but never as records
    if records is None or isinstance(records, (str, bytes, Mapping)):
        return []
    try:
        return [record for record in records if isinstance(record, Mapping)]
    except TypeError:
        return []


def _safe_total(total: Any) -> int:
    if isinstance(total, bool):
        return 0
    try:
        return max(0, int(total))
    except (TypeError, ValueError):
        return 0


_admin_store: ResourceStore | None = None


def get_admin_store() -> ResourceStore:
    global _admin_store
    if _admin_store is None:
        _admin_store = ResourceStore()
    return _admin_store
