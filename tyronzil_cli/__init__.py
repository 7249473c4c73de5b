"""
Command-line interface for tyronzil.
"""
