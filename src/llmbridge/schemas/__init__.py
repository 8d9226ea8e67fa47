"""Wire schemas for each provider format"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import MalformedPayloadError

M = TypeVar("M", bound=BaseModel)


def decode_payload(model: Type[M], payload: Any, provider: str) -> M:
    """Decode a raw payload into a provider schema model

    Raises:
        MalformedPayloadError: If the payload is not a mapping or does not
            match the schema
    """
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"{provider} payload must be a JSON object, got {type(payload).__name__}",
            provider=provider,
        )
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise MalformedPayloadError(
            f"{provider} payload does not match {model.__name__}",
            provider=provider,
            details={"errors": errors},
        ) from exc
