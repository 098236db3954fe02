"""Tests for the Bank API service."""
