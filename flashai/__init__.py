"""Flash-AI ingestion backend: PDF upload jobs, vision analysis and flashcard synthesis."""
