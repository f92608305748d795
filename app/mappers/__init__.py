"""
app/mappers package marker.
"""

from app.mappers.schema_mapper import (
    CANONICAL_FIELDS,
    REQUIRED_CANONICAL_FIELDS,
    MappingErrorDetail,
    MappingResolution,
    SchemaMapper,
    SchemaMappingError,
    normalize_header,
)

__all__ = [
    "CANONICAL_FIELDS",
    "REQUIRED_CANONICAL_FIELDS",
    "MappingErrorDetail",
    "MappingResolution",
    "SchemaMapper",
    "SchemaMappingError",
    "normalize_header",
]
