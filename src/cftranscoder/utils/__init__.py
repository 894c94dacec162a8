"""Shared utilities for cftranscoder."""
