"""UA census extract cleaner: rebuilds (urban agglomeration, year) records from grouped spreadsheet extracts."""

__version__ = "0.1.0"
