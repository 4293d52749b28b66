"""Dirty Data analyzer -- two-pass LLM review of spreadsheets and PDFs."""

__version__ = "0.1.0"
