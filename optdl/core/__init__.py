"""Core reconciliation logic for optical disk drive letters."""
