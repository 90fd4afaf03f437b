"""
Command modules for vappnet CLI.
"""
