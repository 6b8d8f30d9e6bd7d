from mediafetch.services.schemas.media import (
    FormatRead,
    MediaRead,
)
__all__ = [
    "FormatRead",
    "MediaRead",
]
