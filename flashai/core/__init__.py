"""
Core domain logic: job tracking, the ingestion pipeline and exceptions.
"""
