"""
Tests Package - Unit tests for LectureBot.
==========================================

Test modules:
- test_shared: Configuration, errors, retries, skill schemas
- test_indexing: Gemini embeddings and Supabase similarity search
- test_rag: Normalizer, prompts, retriever, composer, generator
- test_pipeline: End-to-end pipeline on mocked providers
- test_server: Skill webhook (FastAPI TestClient)
- test_cli: Info command (typer CliRunner)

Run tests with:
    pytest tests/
    pytest tests/ -v --cov=src/lecturebot
"""
