"""Format converters for llmbridge"""

from .request_converter import RequestConverter
from .response_converter import ResponseConverter
from .stream_converter import StreamConverter

__all__ = [
    "RequestConverter",
    "ResponseConverter",
    "StreamConverter",
]
