"""Stream chunk converter"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..core.exceptions import ConversionError, LLMBridgeError
from ..ir.schema import UnifiedStreamChunk
from ..streaming.session import StreamSession

if TYPE_CHECKING:
    from ..utils.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


class StreamConverter:
    """Converts streamed chunks between provider formats

    Each source chunk is decoded to a unified chunk, folded into the
    session and re-encoded; one source chunk may yield zero or more
    target chunks.
    """

    def __init__(self, registry: "ProviderRegistry") -> None:
        self.registry = registry

    def convert_chunk(
        self,
        chunk: Any,
        from_provider: str,
        to_provider: str,
        session: StreamSession,
    ) -> List[Any]:
        """Convert one chunk

        Raises:
            StreamClosedError: If the session already saw the end of the stream
            LLMBridgeError: If the chunk is malformed or cannot be represented
            ConversionError: If conversion fails unexpectedly
        """
        from_adapter = self.registry.get_adapter(from_provider)
        to_adapter = self.registry.get_adapter(to_provider)

        try:
            unified_chunk = from_adapter.chunk_to_ir(chunk, session)
            session.apply(unified_chunk)
            return to_adapter.chunk_from_ir(unified_chunk, session)
        except LLMBridgeError:
            raise
        except Exception as e:
            raise ConversionError(
                f"Failed to convert stream chunk from {from_provider} to {to_provider}",
                str(from_provider),
                str(to_provider),
                {"original_error": str(e)},
            ) from e

    def convert_stream(
        self,
        chunks: Iterable[Any],
        from_provider: str,
        to_provider: str,
        session: Optional[StreamSession] = None,
    ) -> List[Any]:
        """Convert a complete stream and return the flattened target chunks"""
        session = session or StreamSession()
        output: List[Any] = []
        for chunk in chunks:
            output.extend(self.convert_chunk(chunk, from_provider, to_provider, session))
        if not session.closed:
            # Source stream ended without an end marker
            final = UnifiedStreamChunk(id=session.id, model=session.model, done=True)
            session.close()
            output.extend(self.registry.get_adapter(to_provider).chunk_from_ir(final, session))
        logger.debug("Converted stream %s -> %s: %d chunks", from_provider, to_provider, len(output))
        return output
