"""
Backup plan administration UI.

This package provides a FastAPI application for editing the backup plan
table, with interchangeable CSV, SQLite and MySQL storage behind a common
data source interface.
"""
