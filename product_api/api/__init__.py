"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory, lifespan, root listing and health check
- **routes**: Product endpoints under ``/api/products``
- **security**: API key check guarding create, update and delete
- **middleware**: Request context, request logging and exception handlers
- **schemas**: Pydantic response models and the error envelope
- **utils**: orjson-backed JSON responses
"""
