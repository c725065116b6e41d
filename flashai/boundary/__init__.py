"""
Boundary layer: adapters for remote models, the database and file storage.
"""
