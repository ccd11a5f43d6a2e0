"""
Application layer: use cases and rule evaluation.
"""
