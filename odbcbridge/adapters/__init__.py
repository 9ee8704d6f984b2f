"""Database adapters for odbcbridge."""
