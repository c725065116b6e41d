"""
Application layer: service orchestrators.
"""
