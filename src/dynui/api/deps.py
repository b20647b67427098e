"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from dynui.agent.backend import GenerationBackend, create_backend


def get_backend() -> GenerationBackend:
    """Get the generation backend for a request."""
    return create_backend()


# Type aliases for cleaner route signatures
Backend = Annotated[GenerationBackend, Depends(get_backend)]
