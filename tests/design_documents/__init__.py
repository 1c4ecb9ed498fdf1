"""Tests for the design_documents package."""
