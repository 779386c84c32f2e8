"""
CodeShelf Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [API Version]
            → [GZip] → [CORS] → Route Handler

    - Rate limit first: reject excess traffic before any processing
    - Request ID before logging: every access line carries the ID
    - API version: stamps X-API-Version on /api responses
"""
