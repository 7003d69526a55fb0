"""
Tynda Backend — Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Session] → [GZip] → [CORS] → Route

    1. Request ID: correlation ID for every log line and the X-Request-ID header
    2. Logging: method, path, status, duration tagged with the request ID
    3. Session: Starlette's signed-cookie SessionMiddleware (request.session)
"""
