from .base import ServiceProvider
from .nearai import NearaiCloudClient, extract_chat_completion_id
from .nras import NrasClient

__all__ = [
    "ServiceProvider",
    "NearaiCloudClient",
    "NrasClient",
    "extract_chat_completion_id",
]
