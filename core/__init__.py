"""Shared process setup."""
