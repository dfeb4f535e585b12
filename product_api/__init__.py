"""Product API - catalog service for a single product resource.

The service exposes CRUD, filtering, pagination, text search and aggregate
statistics over products, protected by a shared API key for mutations.

Architecture Overview:
- **API Layer**: FastAPI routes, middleware and exception handlers
- **Core Layer**: Configuration, logging, tracing and the error taxonomy
- **Products**: Validation rules, query building and statistics
- **Infrastructure Layer**: Async SQLAlchemy persistence and seeding
"""
