"""REST API layer (FastAPI) for the RAG AI Service."""
