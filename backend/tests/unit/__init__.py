"""
Unit Tests

Run without PostgreSQL or an LLM provider: the database session is a mock
and LLM clients are replaced per test.
"""
