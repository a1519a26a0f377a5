"""
Pickcopy - interactively pick files and bundle them for LLM prompts.

This package wires together ``fd`` for file discovery, ``fzf`` for fuzzy
multi-selection and ``files-to-prompt`` for formatting, then sends the
resulting text to the clipboard, a file, or standard output.
"""

__version__ = "0.1.0"
__author__ = "Pickcopy Team"
