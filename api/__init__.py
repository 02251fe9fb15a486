"""api/ -- FastAPI application, request/response models, and REST routes."""
