"""Tests for the identifiers package."""
