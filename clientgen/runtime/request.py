"""Gather the parts of an API request and execute it with httpx."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote, urlencode

import httpx

from .dispatch import is_json_content_type
from .encoding import encode_deep_object, format_value, resolve_template
from .serialization import to_json

if TYPE_CHECKING:
    from .dispatch import ResponseDispatcher

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ApiRequest:
    """Utility class to build and send one REST API request.

    server_url is the base URL including scheme, host and base path; path_url
    is the endpoint path and may contain {param} placeholders.
    """

    def __init__(
        self,
        method: str,
        server_url: str,
        path_url: str,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.method = method.upper()
        self.server_url = server_url
        self.path_url = path_url
        self.client = client
        self.path_params: dict[str, str] = {}
        self.query_params: list[tuple[str, str]] = []
        self.header_params: dict[str, str] = {}
        self.cookie_params: dict[str, str] = {}
        logger.debug(
            "Creating ApiRequest: method=%s, serverUrl=%s, pathUrl=%s",
            self.method, server_url, path_url,
        )

    def set_header_param(self, key: str, value: Any) -> None:
        if value is None:
            return
        self.header_params[key] = format_value(value)

    def set_cookie_param(self, key: str, value: Any) -> None:
        if value is None:
            return
        self.cookie_params[key] = format_value(value)

    def set_path_param(self, key: str, value: Any) -> None:
        """URL-encode a value to add as a path parameter."""
        if value is None:
            return
        self.path_params[key] = quote(format_value(value), safe="")

    def set_query_param(
        self,
        key: str,
        value: Any,
        style: str = "form",
        explode: bool = True,
    ) -> None:
        """Add a query-string parameter.

        deepObject style flattens objects into key[sub] fields. Form style
        repeats the key per list item when exploded and joins with commas
        otherwise.
        """
        if value is None:
            return
        data = to_json(value)
        if style == "deepObject":
            self.query_params.extend(encode_deep_object(data, key))
        elif isinstance(data, list):
            if explode:
                self.query_params.extend((key, format_value(item)) for item in data)
            else:
                self.query_params.append((key, ",".join(format_value(item) for item in data)))
        elif isinstance(data, dict):
            if explode:
                self.query_params.extend((k, format_value(v)) for k, v in data.items())
            else:
                joined = ",".join(f"{k},{format_value(v)}" for k, v in data.items())
                self.query_params.append((key, joined))
        else:
            self.query_params.append((key, format_value(data)))

    def get_url(self) -> str:
        """URL of the request with path and query-string parameters resolved."""
        path = resolve_template(self.path_url, self.path_params)
        url = self.server_url.rstrip("/") + "/" + path.lstrip("/")
        if self.query_params:
            url += "?" + urlencode(self.query_params)
        return url

    def _build_body(self, body: Any, content_type: str, headers: dict[str, str]) -> dict[str, Any]:
        payload = to_json(body)
        if content_type == FORM_CONTENT_TYPE:
            headers["Content-Type"] = content_type
            return {"content": urlencode(encode_deep_object(payload))}
        if is_json_content_type(content_type):
            headers["Content-Type"] = content_type
            return {"json": payload}
        if isinstance(payload, (str, bytes)):
            headers["Content-Type"] = content_type
            return {"content": payload}
        raise ValueError(f"Unsupported request body format: {content_type}")

    def make_request(
        self,
        body: Any = None,
        handler: Optional[ResponseDispatcher] = None,
        content_type: str = "application/json",
    ) -> httpx.Response:
        """Send the request and pass the response to handler, if given."""
        url = self.get_url()
        headers = dict(self.header_params)
        if self.cookie_params:
            headers["Cookie"] = "; ".join(f"{k}={v}" for k, v in self.cookie_params.items())
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs = self._build_body(body, content_type, headers)
        logger.debug("makeRequest: method=%s, url=%s", self.method, url)

        if self.client is not None:
            response = self.client.request(self.method, url, headers=headers, **kwargs)
        else:
            with httpx.Client() as client:
                response = client.request(self.method, url, headers=headers, **kwargs)
                response.read()

        if handler is not None:
            handler.handle_response(response)
        return response
