"""
Shared utilities for the HN Digest pipeline: structured logging and
error handling.
"""
