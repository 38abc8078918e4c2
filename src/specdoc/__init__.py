"""specdoc -- Normalize Swagger 2.x and OpenAPI 3.x descriptions for documentation.

This package loads API description documents and turns them into one
cross-linked documentation graph: groups of methods, their parameters and
responses, and a deduplicated list of resources with synthesized JSON
examples, ready for a renderer.

Typical workflow::

    specdoc inspect groups --spec petstore.yaml
    specdoc inspect resource pet --spec petstore.yaml

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    parser: Loading, ``$ref`` resolution, and dialect adapters.
    normalizer: The schema normalization and resource resolution engine.
    suite: Loading one or many specifications.
    config: XDG-aware configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting and log routing with Rich.
"""

__version__ = "0.1.0"
