# Services package init
"""
Notes API — Services Layer
===========================

What:  Persistence layer sitting between routes (HTTP) and the database.

Service Inventory:
    - NoteStore: CRUD over the notes table, typed errors at its boundary
"""
