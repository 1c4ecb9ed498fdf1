"""Tests for the records package."""
