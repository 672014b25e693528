from .api import ApiError, RentalsClient
from .images import DataUrlImageNormalizer, ImageError, ImageNormalizer
from .session import SessionStore

__all__ = [
    "ApiError",
    "RentalsClient",
    "DataUrlImageNormalizer",
    "ImageError",
    "ImageNormalizer",
    "SessionStore",
]
