"""
Test suite for the Habit Tracker application.

This package contains all test types:
- Unit tests
- Integration tests
- API endpoint tests
- Regression tests
- Property-based tests
"""
