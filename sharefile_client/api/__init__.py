"""ShareFile v3 API access for sharefile_client.

Modules:

http : module
    Authenticated requests.Session factory and request journal.
items : module
    Items endpoints (upload sessions, content download) and the
    RemoteItemService protocol the rest of the library depends on.

Public API:

make_session : function
    Create a bearer-authenticated requests.Session.
RequestJournal : class
    Records request/response pairs sent through a session.
ItemsApi : class
    requests-based RemoteItemService implementation.
UploadSpecification : dataclass
    Upload session returned by the API (chunk URI and friends).
"""

from .http import BearerAuth, RequestJournal, make_session
from .items import (
    ItemsApi,
    RemoteItemService,
    UploadSpecification,
    format_query_value,
    to_query_params,
)

__all__ = [
    "BearerAuth",
    "RequestJournal",
    "make_session",
    "ItemsApi",
    "RemoteItemService",
    "UploadSpecification",
    "format_query_value",
    "to_query_params",
]
