"""Seed the default editorial workflow for content types that lack one.

Usage:
    uv run python -m scripts.seed_default_workflows [content_type ...]
Without arguments, uses WORKFLOW_BOOTSTRAP_CONTENT_TYPES. All imports use app.*.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.infrastructure.persistence import database
from app.infrastructure.services import ConfiguredRoleResolver
from app.infrastructure.services.workflow_bootstrap import ensure_default_workflows


async def main() -> None:
    """Create one default workflow covering every content type without a default."""
    settings = get_settings()
    content_types = sys.argv[1:] or settings.bootstrap_content_types
    if not content_types:
        print(
            "Usage: uv run python -m scripts.seed_default_workflows <content_type> [...]\n"
            "or set WORKFLOW_BOOTSTRAP_CONTENT_TYPES",
            file=sys.stderr,
        )
        sys.exit(1)

    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    try:
        definition = await ensure_default_workflows(
            database.AsyncSessionLocal,
            content_types,
            settings.workflow_bootstrap_name,
            ConfiguredRoleResolver(settings.identity_role_names),
        )
    finally:
        await database.engine.dispose()

    if definition is None:
        print(f"Default workflows already present for: {', '.join(content_types)}")
    else:
        print(
            f"Created default workflow {definition.id} ({definition.name}) "
            f"for: {', '.join(definition.content_types)}"
        )


if __name__ == "__main__":
    asyncio.run(main())
