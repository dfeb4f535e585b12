"""Infrastructure layer: persistence for the product catalog.

- **database**: async SQLAlchemy engine, sessions, models, repository and
  the fixture seeding routine
"""
