"""Helpers for data URLs and media sources"""

from __future__ import annotations

import mimetypes
import re
from typing import Optional, Tuple
from urllib.parse import urlparse

from ..ir.schema import MediaSource, PartType

_DATA_URL = re.compile(r"^data:(?P<media_type>[^;,]+)?(?:;[^,]*?)?;base64,(?P<data>.*)$", re.DOTALL)


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


def parse_data_url(url: str) -> Optional[Tuple[Optional[str], str]]:
    """Split a base64 data URL into (media_type, data); None if not one"""
    match = _DATA_URL.match(url)
    if not match:
        return None
    return match.group("media_type"), match.group("data")


def guess_media_type(url: str) -> Optional[str]:
    """Guess a media type from a data URL or a URL's file extension"""
    parsed = parse_data_url(url)
    if parsed is not None:
        return parsed[0]
    media_type, _ = mimetypes.guess_type(urlparse(url).path)
    return media_type


def source_from_url(url: str, media_type: Optional[str] = None) -> MediaSource:
    """Build a MediaSource from either a data URL or a remote URL"""
    parsed = parse_data_url(url)
    if parsed is not None:
        parsed_type, data = parsed
        return MediaSource(data=data, media_type=media_type or parsed_type)
    return MediaSource(url=url, media_type=media_type)


def part_type_for_media(media_type: Optional[str], default: PartType = PartType.FILE) -> PartType:
    """Images become image parts, PDFs and text documents become documents"""
    if not media_type:
        return default
    if media_type.startswith("image/"):
        return PartType.IMAGE
    if media_type == "application/pdf" or media_type.startswith("text/"):
        return PartType.DOCUMENT
    return default
