"""
tempdbaudit - SQL Server tempdb Best-Practice Checker

Run from a source checkout: python src/main.py check SQL01
"""

from tempdbaudit.interface.cli import main


if __name__ == "__main__":
    main()
