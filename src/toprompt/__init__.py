"""
toprompt - copy source files to the clipboard as fenced code blocks.

Files are gathered from explicit paths or directory walks, optionally
filtered through cascading ``.gitignore`` rules, formatted as labeled
markdown code blocks and placed on the system clipboard for pasting into
an LLM prompt.
"""

__version__ = "0.1.0"
