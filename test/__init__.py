"""Test suite for multishot."""
