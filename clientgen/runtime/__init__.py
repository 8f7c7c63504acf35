"""Runtime support imported by generated clients."""

from .dispatch import ResponseCase, ResponseDispatcher, match_status, status_range
from .encoding import encode_deep_object, resolve_template
from .errors import UnhandledStatusCode
from .request import ApiRequest
from .scalars import Float32, Float64, Int32, Int64
from .security import SecurityBase, basic_authorization, bearer_authorization
from .serialization import from_json, to_json
from .servers import ServersBase

__all__ = [
    "ApiRequest",
    "Float32",
    "Float64",
    "Int32",
    "Int64",
    "ResponseCase",
    "ResponseDispatcher",
    "SecurityBase",
    "ServersBase",
    "UnhandledStatusCode",
    "basic_authorization",
    "bearer_authorization",
    "encode_deep_object",
    "from_json",
    "match_status",
    "resolve_template",
    "status_range",
    "to_json",
]
