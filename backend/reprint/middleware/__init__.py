# Middleware package init
"""
Reprint Backend — Middleware Package
======================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: records method, path, status, duration once the response exists
    3. GZip / CORS: FastAPI-provided, registered in main.create_app
"""
