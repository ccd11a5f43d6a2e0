"""
Infrastructure layer: SQL Server access, configuration files and logging.
"""
