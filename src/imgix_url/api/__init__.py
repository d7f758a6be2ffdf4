"""imgix-url - FastAPI signing service.

Modules
-------
main
    FastAPI application with the route handlers and the ``main()`` entry
    point that launches uvicorn.
models
    Pydantic models for request and response validation.
"""
