"""
Persistence package for the Movies Service (PostgreSQL via asyncpg).
"""
