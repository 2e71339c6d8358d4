"""
vomitorium - dump a source tree into a single text file for LLM ingestion.

Walks a directory, filters entries by literal exclude patterns, include
directories and file extensions, and streams every selected file into one
output file with ``--- File: <path> ---`` headers.
"""

__version__ = "1.0.0"
