from .permissions import StaticPermissionChecker
from .transform_source_cache import TransformSourceCache

__all__ = ["StaticPermissionChecker", "TransformSourceCache"]
