"""
HN Digest

A personal notification pipeline that scrapes the Hacker News front page,
asks a language model to pick out the AI, machine learning and software
engineering stories, and texts a short summary when anything qualifies.
"""

__version__ = "0.1.0"
__author__ = "HN Digest Team"
