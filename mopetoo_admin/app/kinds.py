from __future__ import annotations

import re
from dataclasses import dataclass

RecordId = int | str

ID_PATTERN = re.compile(r"^[\w-]{1,64}$")
PAGINATION_PARAMS = frozenset({"page", "per_page"})


class UnsupportedOperationError(RuntimeError):
    pass


@dataclass(frozen=True)
class KindDescriptor:
    name: str
    path: str
    envelope_key: str
    label_singular: str
    label_plural: str
    invalid_id_message: str
    filters: frozenset[str] = frozenset()
    id_field: str = "id"
    can_update: bool = False
    can_delete: bool = False
    is_singleton: bool = False

    @property
    def allowed_params(self) -> frozenset[str]:
        return self.filters | PAGINATION_PARAMS

    def record_path(self, record_id: RecordId) -> str:
        return f"{self.path}/{record_id}"

    def require(self, capability: str) -> None:
        supported = {"update": self.can_update, "delete": self.can_delete}.get(capability, False)
        if not supported:
            raise UnsupportedOperationError(f"{self.name} does not support {capability}")


USERS = KindDescriptor(
    name="users",
    path="/api/admin/users",
    envelope_key="users",
    label_singular="usuario",
    label_plural="usuarios",
    invalid_id_message="ID de usuario inválido.",
    filters=frozenset({"search", "is_pro", "is_admin", "active", "plan", "country"}),
    can_update=True,
    can_delete=True,
)
SHELTERS = KindDescriptor(
    name="shelters",
    path="/api/admin/shelters",
    envelope_key="shelters",
    label_singular="refugio",
    label_plural="refugios",
    invalid_id_message="ID de refugio inválido.",
    filters=frozenset({"search", "is_verified"}),
    can_update=True,
    can_delete=True,
)
PETSHOPS = KindDescriptor(
    name="petshops",
    path="/api/admin/stores",
    envelope_key="stores",
    label_singular="tienda",
    label_plural="tiendas",
    invalid_id_message="ID de tienda inválido.",
    filters=frozenset({"search", "is_verified", "plan"}),
    can_update=True,
    can_delete=True,
)
CLINICS = KindDescriptor(
    name="clinics",
    path="/api/admin/clinics",
    envelope_key="clinics",
    label_singular="clínica",
    label_plural="clínicas",
    invalid_id_message="ID de clínica inválido.",
    filters=frozenset({"search", "is_verified", "plan"}),
    can_update=True,
    can_delete=True,
)
TRANSACTIONS = KindDescriptor(
    name="transactions",
    path="/api/admin/transactions",
    envelope_key="transactions",
    label_singular="transacción",
    label_plural="transacciones",
    invalid_id_message="ID de transacción inválido.",
    filters=frozenset({"search", "user_id", "plan", "status", "from", "to"}),
)
DONATIONS = KindDescriptor(
    name="donations",
    path="/api/admin/donations",
    envelope_key="donations",
    label_singular="donación",
    label_plural="donaciones",
    invalid_id_message="ID de donación inválido.",
    filters=frozenset({"user_id", "shelter_id", "status", "from", "to"}),
)
STATS = KindDescriptor(
    name="stats",
    path="/api/admin/stats",
    envelope_key="stats",
    label_singular="estadística",
    label_plural="estadísticas",
    invalid_id_message="",
    is_singleton=True,
)

KINDS: dict[str, KindDescriptor] = {
    kind.name: kind for kind in (USERS, SHELTERS, PETSHOPS, CLINICS, TRANSACTIONS, DONATIONS, STATS)
}
LIST_KINDS: tuple[str, ...] = tuple(name for name, kind in KINDS.items() if not kind.is_singleton)


def get_kind(name: str) -> KindDescriptor:
    try:
        return KINDS[name]
    except KeyError:
        raise KeyError(f"Unknown resource kind: {name!r}") from None


def is_valid_record_id(record_id: object) -> bool:
    # bool is an int subclass; True must not pass as id 1
    if isinstance(record_id, bool):
        return False
    if isinstance(record_id, int):
        return record_id > 0
    if isinstance(record_id, str):
        return ID_PATTERN.fullmatch(record_id) is not None
    return False
