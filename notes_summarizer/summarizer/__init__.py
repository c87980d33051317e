"""Summarization core: style formatting, fallback extraction and remote delegation."""
