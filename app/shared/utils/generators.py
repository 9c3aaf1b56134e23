"""Primary key generation (CUID2) shared by entities, schemas and models."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string.

    Entities assign ids on construction, so a definition's children can be
    referenced by id before anything is flushed.
    """
    return str(_next_cuid())
