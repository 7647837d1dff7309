from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from mopetoo_admin.app.admin_facade import AdminFacade
from mopetoo_admin.app.admin_store import ALL_TOPIC, ERROR_TOPIC
from mopetoo_admin.app.kinds import RecordId, get_kind
from mopetoo_admin.app.models import AdminStats, Record
from mopetoo_admin.app.ui.pagination import PaginationState, goto_page, next_page, prev_page, should_paginate


def toggle_patch(record: Mapping[str, Any], flag: str) -> dict[str, bool]:
    """Patch for flipping one flag; the view decides, the facade only sends it."""
    return {flag: not bool(record.get(flag))}


def count_label(total: int, singular: str, plural: str) -> str:
    return f"{total} {singular if total == 1 else plural}"


class ListingBinding:
    """What every admin list view reads and triggers for one kind."""

    def __init__(self, facade: AdminFacade, kind: str, page_size: int = 20) -> None:
        self.descriptor = get_kind(kind)
        if self.descriptor.is_singleton:
            raise ValueError(f"{kind} is not a list kind; use DashboardBinding")
        self.facade = facade
        self.pagination = PaginationState(page=1, page_size=page_size)
        self.filters: dict[str, Any] = {}

    @property
    def kind(self) -> str:
        return self.descriptor.name

    @property
    def items(self) -> list[Record]:
        return self.facade.store.items(self.kind)

    @property
    def total(self) -> int:
        return self.facade.store.total(self.kind)

    @property
    def is_loading(self) -> bool:
        return self.facade.store.is_loading(self.kind)

    @property
    def error(self) -> str | None:
        return self.facade.store.error

    @property
    def count_label(self) -> str:
        return count_label(self.total, self.descriptor.label_singular, self.descriptor.label_plural)

    @property
    def show_pagination(self) -> bool:
        return should_paginate(self.total)

    @property
    def show_skeleton(self) -> bool:
        return self.is_loading

    @property
    def show_rows(self) -> bool:
        return not self.is_loading and bool(self.items)

    @property
    def show_empty(self) -> bool:
        return not self.is_loading and not self.items and self.error is None

    @property
    def show_error(self) -> bool:
        return self.error is not None

    @property
    def controls_disabled(self) -> bool:
        return self.is_loading

    @property
    def can_update(self) -> bool:
        return self.descriptor.can_update

    @property
    def can_delete(self) -> bool:
        return self.descriptor.can_delete

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        watched = {self.kind, ERROR_TOPIC, ALL_TOPIC}

        def _on_change(topic: str) -> None:
            if topic in watched:
                listener()

        return self.facade.store.subscribe(_on_change)

    async def fetch(self, **filters: Any) -> bool:
        if not filters:
            return await self._load(self.pagination.page, self.filters)
        return await self._load(1, {**self.filters, **filters})

    async def next_page(self) -> bool:
        target = next_page(replace(self.pagination), self.total).page
        if target == self.pagination.page:
            return False
        return await self._load(target, self.filters)

    async def prev_page(self) -> bool:
        target = prev_page(replace(self.pagination)).page
        if target == self.pagination.page:
            return False
        return await self._load(target, self.filters)

    async def goto_page(self, page: int) -> bool:
        target = goto_page(replace(self.pagination), page, self.total).page
        return await self._load(target, self.filters)

    async def _load(self, page: int, filters: dict[str, Any]) -> bool:
        # page and filters track the rows on screen, so they only move on success
        query = {**filters, "page": page, "per_page": self.pagination.page_size}
        loaded = await self.facade.fetch(self.kind, **query)
        if loaded:
            self.filters = filters
            self.pagination.page = page
        return loaded

    async def update(self, record_id: RecordId, patch: Mapping[str, Any]) -> bool:
        return await self.facade.update(self.kind, record_id, patch)

    async def toggle(self, record: Mapping[str, Any], flag: str) -> bool:
        return await self.update(record[self.descriptor.id_field], toggle_patch(record, flag))

    async def delete(self, record_id: RecordId) -> bool:
        return await self.facade.delete(self.kind, record_id)


class DashboardBinding:
    def __init__(self, facade: AdminFacade) -> None:
        self.facade = facade

    @property
    def stats(self) -> AdminStats | None:
        return self.facade.store.stats

    @property
    def is_loading(self) -> bool:
        return self.facade.store.is_loading("stats")

    @property
    def error(self) -> str | None:
        return self.facade.store.error

    @property
    def show_skeleton(self) -> bool:
        return self.is_loading and self.stats is None

    @property
    def show_error_state(self) -> bool:
        return self.error is not None and self.stats is None and not self.is_loading

    async def fetch(self) -> bool:
        return await self.facade.fetch_stats()
