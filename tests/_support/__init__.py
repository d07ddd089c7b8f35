"""Shared models and helpers for enum-handler tests."""
