# Routes package init
"""
Notes API — API Routes Package
===============================

Route Inventory:
    - notes.py:   GET/POST      /notes
                  GET/PUT/DELETE /notes/{id}
    - health.py:  GET           /health

Routes are thin: they read the request, call the NoteStore and return
the response model. Error-to-status mapping lives in main.py.
"""
