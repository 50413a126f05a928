"""
Dotfile Mirror - keep a store copy of selected files from a live tree.

Features:
- Pull files into the store, push them back out
- Report content divergence as unified diffs
- Interactive reconciliation with an external merge tool
- Store trees mirror live trees file-for-file
"""

__version__ = "1.0.0"
