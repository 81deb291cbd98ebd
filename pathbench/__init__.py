"""
Latency comparison harness for two access paths to one PostgreSQL database:
a direct asyncpg binding and a SQL-over-HTTP driver.
"""

__version__ = "0.1.0"
