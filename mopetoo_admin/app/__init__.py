from mopetoo_admin.app.admin_facade import AdminFacade
from mopetoo_admin.app.admin_store import ResourceStore, get_admin_store
from mopetoo_admin.app.error_normalizer import GENERIC_ERROR_MESSAGE, normalize
from mopetoo_admin.app.session import AdminSession

__all__ = [
    "AdminFacade",
    "AdminSession",
    "GENERIC_ERROR_MESSAGE",
    "ResourceStore",
    "get_admin_store",
    "normalize",
]
