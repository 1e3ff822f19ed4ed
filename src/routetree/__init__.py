"""routetree -- Flatten an OData resource model into a tree of API routes.

This package reads an OData CSDL document describing a web API's resource
model and converts its type graph into a depth-bounded, cycle-free tree of
*route nodes*. Every node is one addressable path through the API and is the
unit a downstream generator turns into a command.

Typical workflow::

    routetree routes schema.json --max-depth 3
    routetree inspect segments microsoft.graph.user schema.json

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for configuration and the schema graph.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
