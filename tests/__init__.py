"""
Unit Tests for the Connect6 Engine

This package contains unit tests for all engine components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_moves.py

    # Run with coverage
    pytest tests/ --cov=connect6_engine --cov-report=html

    # Run specific test
    pytest tests/test_board.py::TestWinDetection::test_horizontal_six

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
