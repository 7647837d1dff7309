import asyncio

import pytest

from mopetoo_admin.app.admin_facade import AdminFacade
from mopetoo_admin.app.admin_store import ResourceStore
from mopetoo_admin.app.ui.listing_binding import DashboardBinding, ListingBinding, count_label, toggle_patch


class FakeTransport:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls: list[dict] = []

    async def request(self, method, path, body=None, params=None):
        self.calls.append({"method": method, "path": path, "body": body, "params": params})
        result = self.results.pop(0) if self.results else None
        if isinstance(result, Exception):
            raise result
        return result


class DownError(Exception):
    data = {"error": "Network down"}


def _binding(kind: str, *results) -> tuple[ListingBinding, FakeTransport]:
    transport = FakeTransport(*results)
    facade = AdminFacade(transport, store=ResourceStore())
    return ListingBinding(facade, kind), transport


def _shelters(count: int) -> list[dict]:
    return [{"id": f"shelter-{index}", "is_verified": False, "is_featured": False} for index in range(1, count + 1)]


def test_count_label_pluralization() -> None:
    assert count_label(0, "refugio", "refugios") == "0 refugios"
    assert count_label(1, "refugio", "refugios") == "1 refugio"
    assert count_label(3, "refugio", "refugios") == "3 refugios"


def test_zero_shelters_renders_empty_state_without_pagination() -> None:
    binding, transport = _binding("shelters", {"shelters": [], "total": 0})

    asyncio.run(binding.fetch())

    assert transport.calls[0]["params"] == {"page": 1, "per_page": 20}
    assert binding.total == 0
    assert binding.count_label == "0 refugios"
    assert binding.show_pagination is False
    assert binding.show_empty is True
    assert binding.show_rows is False
    assert binding.show_skeleton is False
    assert binding.show_error is False


def test_pagination_only_renders_above_twenty() -> None:
    binding, _ = _binding("clinics", {"clinics": [], "total": 20}, {"clinics": [], "total": 21})

    asyncio.run(binding.fetch())
    assert binding.show_pagination is False
    asyncio.run(binding.fetch())
    assert binding.show_pagination is True


def test_error_state_hides_empty_message() -> None:
    binding, _ = _binding("users", DownError())

    asyncio.run(binding.fetch())

    assert binding.error == "Network down"
    assert binding.show_error is True
    assert binding.show_empty is False
    assert binding.items == []


def test_loading_shows_skeleton_and_disables_controls() -> None:
    binding, _ = _binding("petshops")
    binding.facade.store.begin_request("petshops")

    assert binding.show_skeleton is True
    assert binding.controls_disabled is True
    assert binding.show_rows is False


def test_filters_reset_page_and_next_page_refetches() -> None:
    binding, transport = _binding(
        "shelters",
        {"shelters": _shelters(20), "total": 45},
        {"shelters": _shelters(20), "total": 45},
        {"shelters": _shelters(5), "total": 45},
    )
    binding.pagination.page = 3

    asyncio.run(binding.fetch(search="norte", is_verified=True))
    asyncio.run(binding.next_page())
    asyncio.run(binding.next_page())
    moved = asyncio.run(binding.next_page())

    assert [call["params"]["page"] for call in transport.calls] == [1, 2, 3]
    assert transport.calls[1]["params"] == {"page": 2, "per_page": 20, "search": "norte", "is_verified": "true"}
    assert moved is False
    assert binding.pagination.page == 3


def test_prev_and_goto_page_stay_in_bounds() -> None:
    binding, transport = _binding("users", {"users": [], "total": 45}, {"users": [], "total": 45})

    assert asyncio.run(binding.prev_page()) is False
    asyncio.run(binding.fetch())
    asyncio.run(binding.goto_page(99))

    assert binding.pagination.page == 3
    assert transport.calls[-1]["params"]["page"] == 3


def test_toggle_builds_opposite_flag_and_updates_record() -> None:
    binding, transport = _binding("shelters", {"shelters": _shelters(1), "total": 1}, {"id": "shelter-1"})

    asyncio.run(binding.fetch())
    ok = asyncio.run(binding.toggle(binding.items[0], "is_verified"))

    assert ok is True
    assert transport.calls[1]["body"] == {"is_verified": True}
    assert binding.items[0]["is_verified"] is True
    assert binding.is_loading is False
    assert binding.error is None


def test_toggle_patch_helper() -> None:
    assert toggle_patch({"is_featured": True}, "is_featured") == {"is_featured": False}
    assert toggle_patch({}, "is_pro") == {"is_pro": True}


def test_delete_through_binding_updates_count_label() -> None:
    binding, _ = _binding("petshops", {"stores": [{"id": "shop-1"}, {"id": "shop-2"}], "total": 2}, None)

    asyncio.run(binding.fetch())
    asyncio.run(binding.delete("shop-1"))

    assert binding.count_label == "1 tienda"
    assert [row["id"] for row in binding.items] == ["shop-2"]


def test_read_only_binding_capabilities() -> None:
    binding, _ = _binding("transactions")

    assert binding.can_update is False
    assert binding.can_delete is False


def test_stats_is_not_a_list_kind() -> None:
    facade = AdminFacade(FakeTransport(), store=ResourceStore())

    with pytest.raises(ValueError):
        ListingBinding(facade, "stats")


def test_subscribe_fires_for_own_kind_and_error_only() -> None:
    binding, _ = _binding("users")
    hits: list[int] = []
    unsubscribe = binding.subscribe(lambda: hits.append(1))

    binding.facade.store.set_collection("users", [{"id": 1}], 1)
    binding.facade.store.set_collection("clinics", [{"id": "c"}], 1)
    binding.facade.store.set_error("x")
    unsubscribe()
    binding.facade.store.set_error(None)

    assert len(hits) == 2


def test_dashboard_binding_states() -> None:
    transport = FakeTransport(DownError(), {"stats": {"total_users": 10}})
    dashboard = DashboardBinding(AdminFacade(transport, store=ResourceStore()))
    dashboard.facade.store.begin_request("stats")
    assert dashboard.show_skeleton is True
    dashboard.facade.store.end_request("stats")

    asyncio.run(dashboard.fetch())
    assert dashboard.show_error_state is True

    asyncio.run(dashboard.fetch())
    assert dashboard.show_error_state is False
    assert dashboard.stats.total_users == 10


def test_rejected_filter_is_not_remembered() -> None:
    binding, transport = _binding("shelters", {"shelters": [], "total": 0})

    with pytest.raises(ValueError):
        asyncio.run(binding.fetch(is_pro=True))

    assert binding.filters == {}
    assert binding.is_loading is False
    assert asyncio.run(binding.fetch()) is True
    assert transport.calls[0]["params"] == {"page": 1, "per_page": 20}


def test_failed_page_move_keeps_current_page() -> None:
    binding, transport = _binding(
        "users",
        {"users": [{"id": 1}], "total": 45},
        DownError(),
        DownError(),
        {"users": [{"id": 21}], "total": 45},
        DownError(),
    )
    asyncio.run(binding.fetch())

    assert asyncio.run(binding.next_page()) is False
    assert binding.pagination.page == 1
    assert asyncio.run(binding.goto_page(3)) is False
    assert binding.pagination.page == 1

    asyncio.run(binding.next_page())
    assert binding.pagination.page == 2
    assert asyncio.run(binding.prev_page()) is False
    assert binding.pagination.page == 2
    assert [call["params"]["page"] for call in transport.calls] == [1, 2, 3, 2, 1]


def test_failed_filtered_fetch_keeps_previous_filters() -> None:
    binding, transport = _binding("clinics", {"clinics": [], "total": 0}, DownError())
    asyncio.run(binding.fetch(search="vet"))

    assert asyncio.run(binding.fetch(plan="pro")) is False
    assert binding.filters == {"search": "vet"}
    assert transport.calls[1]["params"] == {"page": 1, "per_page": 20, "search": "vet", "plan": "pro"}
