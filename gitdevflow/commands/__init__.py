"""
Command modules for gitdevflow CLI.
"""
