"""Shared fixtures: a small but complete OpenAPI document.

The document covers every feature the generator handles: cyclic models,
nested anonymous objects, aliases, deepObject and header parameters, form
bodies, wildcard and default responses, operation servers and every
supported security scheme.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from clientgen.loader import parse_document
from clientgen.model import ApiDocument


def _ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema: dict[str, Any]) -> dict[str, Any]:
    return {"application/json": {"schema": schema}}


SHOP_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Shop API", "version": "1.2.0"},
    "servers": [
        {
            "url": "https://{region}.shop.test/api",
            "variables": {
                "region": {"default": "eu", "enum": ["eu", "us"], "description": "Data region."},
            },
        },
    ],
    "security": [{"bearerAuth": []}],
    "paths": {
        "/v1/items": {
            "get": {
                "operationId": "listItems",
                "summary": "List items.",
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                    {
                        "name": "filter",
                        "in": "query",
                        "style": "deepObject",
                        "explode": True,
                        "schema": {
                            "type": "object",
                            "properties": {
                                "color": {"type": "string"},
                                "tags": {"type": "array", "items": {"type": "string"}},
                            },
                        },
                    },
                ],
                "responses": {
                    "200": {"description": "OK", "content": _json(_ref("ItemList"))},
                    "4XX": {"description": "Client error", "content": _json(_ref("Error"))},
                },
            },
            "post": {
                "operationId": "createItem",
                "requestBody": {"required": True, "content": _json(_ref("Item"))},
                "responses": {
                    "201": {"description": "Created", "content": _json(_ref("Item"))},
                    "default": {"description": "Error", "content": _json(_ref("Error"))},
                },
            },
        },
        "/v1/items/{id}": {
            "parameters": [{"name": "id", "in": "path", "schema": {"type": "string"}}],
            "get": {
                "operationId": "getItem",
                "parameters": [
                    {"name": "X-Trace-Id", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {"description": "OK", "content": _json(_ref("Item"))},
                    "404": {"description": "Not found"},
                },
            },
            "delete": {
                "security": [],
                "responses": {"204": {"description": "Deleted"}},
            },
        },
        "/v1/items/{id}/tags": {
            "parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}],
            "post": {
                "operationId": "addTag",
                "requestBody": {
                    "content": {
                        "application/x-www-form-urlencoded": {
                            "schema": {
                                "type": "object",
                                "required": ["name"],
                                "properties": {
                                    "name": {"type": "string"},
                                    "meta": {
                                        "type": "object",
                                        "properties": {"source": {"type": "string"}},
                                    },
                                },
                            },
                        },
                    },
                },
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": _json({
                            "type": "object",
                            "properties": {"count": {"type": "integer", "format": "int64"}},
                        }),
                    },
                },
            },
        },
        "/health": {
            "get": {
                "operationId": "health",
                "servers": [{"url": "https://status.shop.test"}],
                "security": [],
                "responses": {
                    "200": {"description": "OK", "content": {"text/plain": {"schema": {"type": "string"}}}},
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Item": {
                "type": "object",
                "description": "Something for sale.",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "price": {"type": "number", "format": "double"},
                    "created_at": {"type": "integer", "format": "unix-time"},
                    "in_stock": {"type": "boolean"},
                    "class": {"type": "string", "enum": ["a", "b"]},
                    "dimensions": {
                        "type": "object",
                        "properties": {
                            "width": {"type": "number"},
                            "height": {"type": "number"},
                        },
                    },
                    "related": {"type": "array", "items": _ref("Item")},
                    "owner": _ref("Owner"),
                    "attributes": {"type": "object", "additionalProperties": {"type": "string"}},
                    "metadata": {"type": "object"},
                },
            },
            "Owner": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "items": {"type": "array", "items": _ref("Item")},
                },
            },
            "ItemList": {"type": "array", "items": _ref("Item")},
            "Error": {
                "type": "object",
                "properties": {
                    "message": {"type": "string"},
                    "code": {"type": "integer"},
                },
            },
        },
        "securitySchemes": {
            "bearerAuth": {"type": "http", "scheme": "bearer"},
            "basicAuth": {"type": "http", "scheme": "Basic"},
            "apiKey": {"type": "apiKey", "in": "query", "name": "api_key"},
            "oauth": {"type": "oauth2", "flows": {}},
        },
    },
}


@pytest.fixture
def shop_spec() -> dict[str, Any]:
    """A fresh copy of the sample document, safe to mutate."""
    return copy.deepcopy(SHOP_SPEC)


@pytest.fixture
def shop_document(shop_spec) -> ApiDocument:
    return parse_document(shop_spec)
