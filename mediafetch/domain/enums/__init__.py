from mediafetch.domain.enums.provider import Provider

__all__ = [
    "Provider",
]
