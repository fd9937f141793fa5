"""Static game tables and the draw engine.

Kept free of FastAPI and storage concerns so it can be reused by the ledger, API routes, and tests.
"""
