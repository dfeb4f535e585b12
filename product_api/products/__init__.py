"""Product domain logic independent of HTTP.

- **validation**: Field rules for create and partial update payloads
- **query**: Filters, pagination and search term handling
- **statistics**: Collection-wide aggregates
"""
