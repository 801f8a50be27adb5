"""
Minbar Test Suite

Run tests with:
    pytest tests/
    pytest tests/test_engine.py -v
    pytest tests/test_engine.py::TestCountdown -v
"""
