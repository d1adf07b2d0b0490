# Routes package init
"""
NoteShelf Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:   GET  /api/notes            (paged list)
                  POST /api/notes            (create)
                  GET  /api/notes/{id}       (single note)
    - health.py:  GET  /api/healthchecker    (service health check)

Routes stay thin: extract request data, call NoteStore, build the envelope.
"""
