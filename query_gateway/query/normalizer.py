"""
Query descriptor normalization.

The query editor sends one of two wire shapes depending on how the query was
written: in code mode the payload is a JSON document embedded in a string, in
builder mode it is already structured. Both resolve to a CanonicalQuery.
"""

import logging
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from query_gateway.core.errors import MalformedInputError
from query_gateway.core.models import (
    BuilderQueryModel,
    CanonicalQuery,
    CodeQueryModel,
    QueryPayload,
)

logger = logging.getLogger(__name__)

CODE_MODE = "code"

RawDescriptor = Union[bytes, str, Dict[str, Any]]


class _ModeDiscriminator(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    editor_mode: str = Field("", alias="editorMode")


def _validate(model: type, raw: RawDescriptor) -> Any:
    if isinstance(raw, dict):
        return model.model_validate(raw)
    return model.model_validate_json(raw)


class QueryNormalizer:
    """
    Resolves raw query descriptors into canonical queries.

    Only the editorMode discriminator is read first; the matching variant is
    then decoded in full. The other variant is never attempted.
    """

    def parse_descriptor(self, raw: RawDescriptor) -> BuilderQueryModel:
        """
        Decode a raw descriptor into the builder shape.

        Args:
            raw: JSON body as bytes, text or an already decoded mapping

        Returns:
            Builder-shaped descriptor, whichever variant was sent

        Raises:
            MalformedInputError: If the body or the embedded payload is not valid
        """
        try:
            mode = _validate(_ModeDiscriminator, raw).editor_mode
        except ValidationError as e:
            logger.error("error decoding the editor mode: %s", e)
            raise MalformedInputError(f"json unmarshal: {e}") from e

        if mode != CODE_MODE:
            try:
                return _validate(BuilderQueryModel, raw)
            except ValidationError as e:
                logger.error("error decoding the builder-mode query: %s", e)
                raise MalformedInputError(f"json unmarshal: {e}") from e

        try:
            code_query = _validate(CodeQueryModel, raw)
        except ValidationError as e:
            logger.error("error decoding the code-mode query: %s", e)
            raise MalformedInputError(f"json unmarshal: {e}") from e

        try:
            payload = QueryPayload.model_validate_json(code_query.payload)
        except ValidationError as e:
            logger.error("error decoding the code-mode payload: %s", e)
            raise MalformedInputError(f"json unmarshal: {e}") from e

        return BuilderQueryModel(
            target=code_query.target,
            payload=payload,
            interval_ms=code_query.interval_ms,
            max_data_points=code_query.max_data_points,
            time_range=code_query.time_range,
        )

    def normalize(self, raw: RawDescriptor) -> CanonicalQuery:
        """Decode a raw descriptor straight into a CanonicalQuery."""
        return self.to_canonical(self.parse_descriptor(raw))

    @staticmethod
    def to_canonical(descriptor: BuilderQueryModel) -> CanonicalQuery:
        query = CanonicalQuery(
            collection=descriptor.target,
            find_query_text=descriptor.payload.find_query,
            projection_field=descriptor.payload.projection,
            max_points=descriptor.max_data_points,
        )
        logger.debug("parsed query: %s", query)
        return query
