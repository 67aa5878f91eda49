"""Contributor classes and extensions shared by the test suite."""
