"""Generate typed Python clients from OpenAPI 3 documents."""
