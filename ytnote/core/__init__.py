"""
Core functionality for the ytnote application.

This package contains the URL detector, transcript fetcher, prompt builder,
summarization providers, formatter and the single-flight pipeline with its
triggers.
"""
