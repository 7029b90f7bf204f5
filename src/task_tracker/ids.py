from __future__ import annotations

import uuid


# PUBLIC_INTERFACE
def new_id() -> str:
    """Return a new random opaque identifier (UUID4 string)."""
    return str(uuid.uuid4())
