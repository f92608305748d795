"""
app/mappers/schema_mapper.py

Header-driven mapping from sales export columns to canonical record fields.

Two export shapes are recognised out of the box: the full
"sales-by-item" report ("Product", "Total Revenue", "Total Profit $",
"Reqs. Date", ...) and the short dashboard shape ("date", "sales",
"profit").  Anything else can be mapped with manual overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any, Mapping, Sequence

CANONICAL_FIELDS: tuple[str, ...] = (
    "product",
    "customer",
    "sales_rep",
    "transaction_date",
    "quantity",
    "unit_cost",
    "unit_price",
    "total_revenue",
    "total_profit",
    "total_profit_pct",
    "payment_status",
    "requested_date",
)

REQUIRED_CANONICAL_FIELDS: tuple[str, ...] = (
    "product",
    "transaction_date",
    "total_revenue",
    "total_profit",
)

DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "product": ("product_name", "item", "item_name", "sku_name"),
    "customer": ("customer_name", "client", "account", "buyer"),
    "sales_rep": ("sales_representative", "rep", "salesperson", "account_manager"),
    "transaction_date": ("date", "sale_date", "order_date", "invoice_date", "transaction_dt"),
    "quantity": ("qty", "units", "units_sold"),
    "unit_cost": ("cost_per_unit", "cost_unit"),
    "unit_price": ("price_per_unit", "price_unit", "price"),
    "total_revenue": ("revenue", "sales", "total_sales", "amount"),
    "total_profit": ("total_profit $", "profit", "profit $", "gross_profit"),
    "total_profit_pct": ("total_profit %", "profit %", "margin %", "profit_pct", "margin_pct"),
    "payment_status": ("invoice_payment_status", "invoice_status", "status"),
    "requested_date": ("reqs. date", "reqs_date", "request_date", "due_date"),
}

# A canonical field left unmapped may borrow the column resolved for another.
# Sales-by-item exports carry no dedicated transaction date column.
FALLBACK_FIELDS: dict[str, str] = {
    "transaction_date": "requested_date",
}


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.

    ``%`` and ``$`` are spelled out so that "Total Profit %" and
    "Total Profit $" remain distinguishable.
    """

    spelled = header.strip().lower().replace("%", "pct").replace("$", "amount")
    return "".join(ch for ch in spelled if ch.isalnum())


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    One reason a header mapping could not be resolved.
    """

    code: str
    message: str
    canonical_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None


class SchemaMappingError(ValueError):
    """
    Raised when source headers cannot be mapped onto the required fields.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)


@dataclass(frozen=True)
class MappingResolution:
    """
    Final resolved mapping metadata.
    """

    canonical_to_source: dict[str, str]
    source_headers: tuple[str, ...]
    match_strategies: dict[str, str]


class SchemaMapper:
    """
    Resolves source export headers into canonical field mappings.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Sequence[str]] | None = None,
        fuzzy_threshold: float = 0.84,
    ) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            canonical: tuple(values)
            for canonical, values in (aliases or DEFAULT_COLUMN_ALIASES).items()
        }
        self._fuzzy_threshold = max(0.0, min(1.0, fuzzy_threshold))

    def resolve_mapping(
        self,
        headers: Sequence[str],
        *,
        manual_overrides: Mapping[str, str] | None = None,
    ) -> MappingResolution:
        """
        Resolve canonical-to-source mapping from headers and overrides.

        Resolution order per field: manual override, exact or alias match,
        fuzzy match, then :data:`FALLBACK_FIELDS`.

        Raises
        ------
        SchemaMappingError
            When headers are empty, an override is invalid, or a required
            field stays unmapped.
        """

        source_headers = tuple(header for header in headers if header and header.strip())
        normalized_header_lookup: dict[str, str] = {
            normalize_header(header): header
            for header in source_headers
            if normalize_header(header)
        }
        if not source_headers:
            raise SchemaMappingError(
                message="Source headers are empty; cannot resolve header mapping.",
                errors=[
                    MappingErrorDetail(
                        code="empty_headers",
                        message="No source headers were provided.",
                    )
                ],
            )

        resolved: dict[str, str] = {}
        strategies: dict[str, str] = {}
        mapping_errors: list[MappingErrorDetail] = []

        for canonical_field, source_column in (manual_overrides or {}).items():
            normalized_canonical = canonical_field.strip()
            if not normalized_canonical or not source_column.strip():
                continue
            if normalized_canonical not in CANONICAL_FIELDS:
                mapping_errors.append(
                    MappingErrorDetail(
                        code="invalid_override_field",
                        message="Manual override contains unknown canonical field.",
                        canonical_field=normalized_canonical,
                        source_column=source_column,
                    )
                )
                continue

            matched_source = normalized_header_lookup.get(normalize_header(source_column))
            if matched_source is None:
                mapping_errors.append(
                    MappingErrorDetail(
                        code="override_source_not_found",
                        message="Manual override points to a source column not present in the headers.",
                        canonical_field=normalized_canonical,
                        source_column=source_column,
                        context={"source_headers": list(source_headers)},
                    )
                )
                continue

            resolved[normalized_canonical] = matched_source
            strategies[normalized_canonical] = "override"

        used_headers = set(resolved.values())
        for canonical_field in CANONICAL_FIELDS:
            if canonical_field in resolved:
                continue

            exact = self._find_exact_or_alias_match(
                canonical_field=canonical_field,
                normalized_header_lookup=normalized_header_lookup,
            )
            if exact is not None and exact not in used_headers:
                resolved[canonical_field] = exact
                strategies[canonical_field] = "exact_or_alias"
                used_headers.add(exact)

        # Fuzzy matching runs only after every exact match has claimed its
        # header, so a near-miss never steals a column from an exact match.
        for canonical_field in CANONICAL_FIELDS:
            if canonical_field in resolved:
                continue

            fuzzy_match = self._find_best_fuzzy_match(
                canonical_field=canonical_field,
                normalized_header_lookup=normalized_header_lookup,
                used_headers=used_headers,
            )
            if fuzzy_match is not None:
                resolved[canonical_field] = fuzzy_match
                strategies[canonical_field] = "fuzzy"
                used_headers.add(fuzzy_match)

        for canonical_field, donor_field in FALLBACK_FIELDS.items():
            if canonical_field not in resolved and donor_field in resolved:
                resolved[canonical_field] = resolved[donor_field]
                strategies[canonical_field] = "fallback"

        for required in REQUIRED_CANONICAL_FIELDS:
            if required not in resolved:
                mapping_errors.append(
                    MappingErrorDetail(
                        code="required_field_unmapped",
                        message="Required canonical field is not mapped.",
                        canonical_field=required,
                        context={"source_headers": list(source_headers)},
                    )
                )

        if mapping_errors:
            missing = sorted(
                error.canonical_field
                for error in mapping_errors
                if error.code == "required_field_unmapped"
            )
            raise SchemaMappingError(
                message=f"Header mapping failed. Missing required fields: {', '.join(missing) or 'none'}.",
                errors=mapping_errors,
            )

        return MappingResolution(
            canonical_to_source=resolved,
            source_headers=source_headers,
            match_strategies=strategies,
        )

    def map_row(
        self,
        *,
        raw_row: Mapping[str, str | None],
        mapping: MappingResolution,
    ) -> dict[str, str | None]:
        """
        Map one source row into canonical raw field values.
        """

        return {
            canonical_field: raw_row.get(source_column)
            for canonical_field, source_column in mapping.canonical_to_source.items()
        }

    def _find_exact_or_alias_match(
        self,
        *,
        canonical_field: str,
        normalized_header_lookup: Mapping[str, str],
    ) -> str | None:
        candidates = (
            canonical_field,
            *self._aliases.get(canonical_field, ()),
        )
        for candidate in candidates:
            match = normalized_header_lookup.get(normalize_header(candidate))
            if match:
                return match
        return None

    def _find_best_fuzzy_match(
        self,
        *,
        canonical_field: str,
        normalized_header_lookup: Mapping[str, str],
        used_headers: set[str],
    ) -> str | None:
        alias_candidates = [canonical_field, *self._aliases.get(canonical_field, ())]
        normalized_candidates = [normalize_header(item) for item in alias_candidates if normalize_header(item)]
        if not normalized_candidates:
            return None

        best_header: str | None = None
        best_score = 0.0
        for header_norm, header_raw in normalized_header_lookup.items():
            if header_raw in used_headers:
                continue
            for candidate in normalized_candidates:
                score = SequenceMatcher(None, header_norm, candidate).ratio()
                if score > best_score:
                    best_score = score
                    best_header = header_raw

        if best_header is not None and best_score >= self._fuzzy_threshold:
            return best_header
        return None
