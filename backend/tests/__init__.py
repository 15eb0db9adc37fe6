"""
Exam Prep Companion Test Suite

Test Structure:
    tests/
    ├── conftest.py   # Environment, mock session and record factories
    └── unit/         # Services, scoring and routers with the store mocked

Running Tests:
    # From the repository root
    pytest -v

    # A single module
    pytest backend/tests/unit/test_streak_tracking.py -v
"""
