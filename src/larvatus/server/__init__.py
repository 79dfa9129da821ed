"""Server — ASGI boundary, response emission, and uvicorn launcher."""
