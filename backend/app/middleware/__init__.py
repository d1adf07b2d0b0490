# Middleware package init
"""
NoteShelf Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Note Access Log] → [GZip] → [CORS] → Route Handler

    1. Request ID: generate the correlation ID
    2. Note access log: record which note operation ran and how it ended
"""
