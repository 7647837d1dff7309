from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from mopetoo_admin.app.admin_store import ResourceStore, get_admin_store
from mopetoo_admin.app.error_normalizer import normalize
from mopetoo_admin.app.infrastructure.logging.logger import get_logger, log_action
from mopetoo_admin.app.kinds import KindDescriptor, RecordId, get_kind, is_valid_record_id
from mopetoo_admin.app.models import parse_listing, parse_stats


class Transport(Protocol):
    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any: ...


class AdminFacade:
    """Async access layer between the admin views and the API.

    Every call publishes its outcome into the shared error slot of the store
    and never raises transport failures to the caller; methods report
    success as a bool.
    """

    def __init__(
        self,
        transport: Transport,
        store: ResourceStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.store = store or get_admin_store()
        self.logger = logger or get_logger("mopetoo_admin.facade")
        self._in_flight: set[str] = set()

    @property
    def error(self) -> str | None:
        return self.store.error

    # generic engine

    async def fetch(self, kind: str, **filters: Any) -> bool:
        descriptor = get_kind(kind)
        params = _build_query_params(descriptor, filters)
        self.store.begin_request(kind)
        self.store.set_error(None)
        try:
            payload = await self.transport.request("GET", descriptor.path, params=params or None)
            if descriptor.is_singleton:
                self.store.set_stats(parse_stats(payload))
            else:
                listing = parse_listing(payload, descriptor.envelope_key)
                self.store.set_collection(kind, listing.items, listing.total)
            self.store.set_error(None)
        except Exception as error:
            self._record_failure(kind, "fetch", error)
            return False
        finally:
            self.store.end_request(kind)
        log_action(self.logger, module=kind, action="fetch", outcome="success")
        return True

    async def update(self, kind: str, record_id: RecordId, patch: Mapping[str, Any] | None) -> bool:
        descriptor = get_kind(kind)
        descriptor.require("update")
        if not self._accept_id(descriptor, record_id):
            return False
        changes = dict(patch or {})
        if not changes:
            return True

        operation = f"update:{kind}:{record_id}"
        if not self._begin_mutation(operation):
            return False
        self.store.begin_request(kind)
        self.store.set_error(None)
        try:
            await self.transport.request("PATCH", descriptor.record_path(record_id), body=changes)
            self.store.update_record(kind, record_id, changes)
            selected = self.store.selected(kind)
            if selected is not None and selected.get(descriptor.id_field) == record_id:
                self.store.set_selected(kind, {**selected, **changes, descriptor.id_field: record_id})
            self.store.set_error(None)
        except Exception as error:
            self._record_failure(kind, "update", error, record_id)
            return False
        finally:
            self.store.end_request(kind)
            self._end_mutation(operation)
        log_action(self.logger, module=kind, action="update", outcome="success", record_id=record_id)
        return True

    async def delete(self, kind: str, record_id: RecordId) -> bool:
        descriptor = get_kind(kind)
        descriptor.require("delete")
        if not self._accept_id(descriptor, record_id):
            return False
        selected = self.store.selected(kind)
        is_selected = selected is not None and selected.get(descriptor.id_field) == record_id
        if self.store.find(kind, record_id) is None and not is_selected:
            log_action(self.logger, module=kind, action="delete", outcome="noop", record_id=record_id)
            return True

        operation = f"delete:{kind}:{record_id}"
        if not self._begin_mutation(operation):
            return False
        self.store.begin_request(kind)
        self.store.set_error(None)
        try:
            await self.transport.request("DELETE", descriptor.record_path(record_id))
            self.store.remove_record(kind, record_id)
            if is_selected:
                self.store.clear_selected(kind)
            self.store.set_error(None)
        except Exception as error:
            self._record_failure(kind, "delete", error, record_id)
            return False
        finally:
            self.store.end_request(kind)
            self._end_mutation(operation)
        log_action(self.logger, module=kind, action="delete", outcome="success", record_id=record_id)
        return True

    # per-kind surface

    async def fetch_stats(self) -> bool:
        return await self.fetch("stats")

    async def fetch_users(self, **filters: Any) -> bool:
        return await self.fetch("users", **filters)

    async def update_user(self, user_id: RecordId, data: Mapping[str, Any]) -> bool:
        return await self.update("users", user_id, data)

    async def delete_user(self, user_id: RecordId) -> bool:
        return await self.delete("users", user_id)

    async def fetch_shelters(self, **filters: Any) -> bool:
        return await self.fetch("shelters", **filters)

    async def update_shelter(self, shelter_id: RecordId, data: Mapping[str, Any]) -> bool:
        return await self.update("shelters", shelter_id, data)

    async def delete_shelter(self, shelter_id: RecordId) -> bool:
        return await self.delete("shelters", shelter_id)

    async def fetch_petshops(self, **filters: Any) -> bool:
        return await self.fetch("petshops", **filters)

    async def update_petshop(self, petshop_id: RecordId, data: Mapping[str, Any]) -> bool:
        return await self.update("petshops", petshop_id, data)

    async def delete_petshop(self, petshop_id: RecordId) -> bool:
        return await self.delete("petshops", petshop_id)

    async def fetch_clinics(self, **filters: Any) -> bool:
        return await self.fetch("clinics", **filters)

    async def update_admin_clinic(self, clinic_id: RecordId, data: Mapping[str, Any]) -> bool:
        return await self.update("clinics", clinic_id, data)

    async def delete_admin_clinic(self, clinic_id: RecordId) -> bool:
        return await self.delete("clinics", clinic_id)

    async def fetch_transactions(self, **filters: Any) -> bool:
        return await self.fetch("transactions", **filters)

    async def fetch_donations(self, **filters: Any) -> bool:
        return await self.fetch("donations", **filters)

    # helpers

    def is_mutation_in_flight(self, action: str, kind: str, record_id: RecordId) -> bool:
        return f"{action}:{kind}:{record_id}" in self._in_flight

    def _begin_mutation(self, operation: str) -> bool:
        if operation in self._in_flight:
            return False
        self._in_flight.add(operation)
        return True

    def _end_mutation(self, operation: str) -> None:
        self._in_flight.discard(operation)

    def _accept_id(self, descriptor: KindDescriptor, record_id: object) -> bool:
        if is_valid_record_id(record_id):
            return True
        self.store.set_error(descriptor.invalid_id_message)
        log_action(self.logger, module=descriptor.name, action="validate_id", outcome="rejected", level=logging.WARNING)
        return False

    def _record_failure(self, kind: str, action: str, error: Exception, record_id: RecordId | None = None) -> None:
        self.store.set_error(normalize(error))
        log_action(
            self.logger,
            module=kind,
            action=action,
            outcome="error",
            record_id=record_id,
            status_code=getattr(error, "status_code", None),
            trace_id=getattr(error, "trace_id", None),
            level=logging.WARNING,
        )


def _build_query_params(descriptor: KindDescriptor, filters: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(filters) - descriptor.allowed_params)
    if unknown:
        raise ValueError(f"Unsupported filters for {descriptor.name}: {', '.join(unknown)}")
    params: dict[str, Any] = {}
    for key, value in filters.items():
        if value in (None, ""):
            continue
        params[key] = ("true" if value else "false") if isinstance(value, bool) else value
    return params
