# Middleware package init
"""
Notes API — Middleware Package
===============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: accept or generate X-Request-ID, expose it to loggers
    2. Logging: one access log line per request, with duration and request ID
    3. CORS: FastAPI's CORSMiddleware (preflight + headers)

Starlette runs middleware in reverse order of registration, see create_app().
"""
