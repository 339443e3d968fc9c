"""
Career assistant root package.

This package contains all application source code organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, and error hierarchy
- services/  : Session and message lifecycle
- llm/       : Personas, prompts, provider gateways and fallback
- database/  : Session store and message log
- memory/    : Per-session memory and topic extraction
- models/    : Pydantic models for request/response schemas
"""
