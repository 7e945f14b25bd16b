"""Domain layer for moneybox.

Submodules are imported directly (``moneybox.domain.store``,
``moneybox.domain.reports``) so that the database layer can import the
entities without pulling the store in.
"""
