"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries. EntityRepository serves every
entity generically; the list pipeline (filters, search, sort, pagination)
lives in .query.
"""
