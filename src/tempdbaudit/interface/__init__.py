"""
Interface layer: command-line entry point and output formatting.
"""
