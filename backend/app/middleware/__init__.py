"""
Duet Backend — Middleware Package
===================================

Cross-cutting request handling, registered in `create_app()`.

Execution order for an incoming request:
    RateLimit → RequestID → RequestLogging → GZip → CORS → route

Starlette runs middleware in reverse order of `add_middleware` calls, so
`create_app()` adds them from the innermost outward.
"""
