"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that several features use
(DB wiring, env settings, logging, the LLM client). Feature-specific SQL and
business logic live in the corresponding feature package (e.g. `entries/`).
"""
