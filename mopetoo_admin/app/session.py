from __future__ import annotations

from mopetoo_admin.app.admin_facade import AdminFacade
from mopetoo_admin.app.admin_store import ResourceStore, get_admin_store
from mopetoo_admin.app.infrastructure.logging.logger import get_logger, log_action
from mopetoo_admin.app.ui.listing_binding import DashboardBinding, ListingBinding
from mopetoo_admin.clients.auth_store import AuthStore
from mopetoo_admin.clients.config import ClientConfig, load_config
from mopetoo_admin.clients.errors import ApiError
from mopetoo_admin.clients.http_client import HttpClient


class AdminSession:
    def __init__(
        self,
        config: ClientConfig | None = None,
        http: HttpClient | None = None,
        store: ResourceStore | None = None,
        auth_store: AuthStore | None = None,
    ) -> None:
        self.config = config or (http.config if http else load_config())
        self.auth_store = auth_store or (http.auth_store if http else AuthStore())
        self.http = http or HttpClient(self.config, auth_store=self.auth_store)
        self.store = store or get_admin_store()
        self.logger = get_logger("mopetoo_admin.session")
        self.facade = AdminFacade(self.http, store=self.store)
        self.http.register_auth_error_handler(self._on_auth_error)

    def login(self, token: str) -> None:
        self.auth_store.set_token(token)

    def is_authenticated(self) -> bool:
        return bool(self.auth_store.get_token())

    def listing(self, kind: str) -> ListingBinding:
        return ListingBinding(self.facade, kind, page_size=self.config.page_size)

    def dashboard(self) -> DashboardBinding:
        return DashboardBinding(self.facade)

    def logout(self) -> None:
        self.auth_store.clear()
        self.store.clear_all()
        log_action(self.logger, module="session", action="logout", outcome="success")

    async def aclose(self) -> None:
        self.logout()
        await self.http.aclose()

    def _on_auth_error(self, error: ApiError) -> None:
        # 403 keeps the session: the operator is logged in but not an admin
        if error.status_code == 401:
            log_action(self.logger, module="session", action="expire", outcome="error", status_code=401, trace_id=error.trace_id)
            self.auth_store.clear()
