"""Saved-property reports in PDF, Excel, CSV and JSON.

Rows are built once from the field catalog (formatted strings keyed by the
field label) and then handed to the encoder for the requested format. The
encoders themselves are pandas/openpyxl for tabular output and reportlab
(see ``pdf_service``) for PDF.
"""

from __future__ import annotations

import csv
import functools
import io
import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter
from pydantic import ValidationError

from ..config import REPORT_MAX_PROPERTIES
from ..errors import InvalidInputError
from ..models.analysis import ReportFieldPayload, ReportOptions
from ..utils.formatting import format_number
from ..utils.logging import get_logger, log_timing
from ..utils.normalize import round_half_up
from .pdf_service import PDFService, ReportTable

LOGGER = get_logger("services.report")

NOT_AVAILABLE = "N/A"

Formatter = Callable[[Any], str]
Getter = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class ReportField:
    key: str
    label: str
    category: str
    type: str
    formatter: Optional[Formatter] = None
    getter: Optional[Getter] = None

    def raw_value(self, row: Dict[str, Any]) -> Any:
        if self.getter is not None:
            return self.getter(row)
        value: Any = row
        for part in self.key.split("."):
            if not isinstance(value, Mapping):
                return None
            value = value.get(part)
            if value is None:
                return None
        return value

    def render(self, value: Any) -> str:
        if value is None:
            return NOT_AVAILABLE
        if self.formatter is not None:
            return self.formatter(value)
        if self.type == "currency":
            return f"${format_number(value)}" if isinstance(value, (int, float)) else str(value)
        if self.type == "number":
            return format_number(value) if isinstance(value, (int, float)) else str(value)
        if self.type == "date":
            return _format_date(value)
        if self.type == "array":
            return ", ".join(str(v) for v in value) if isinstance(value, list) else str(value)
        return str(value)

    def to_payload(self) -> ReportFieldPayload:
        return ReportFieldPayload(key=self.key, label=self.label, category=self.category, type=self.type)


def _format_date(value: Any) -> str:
    parsed = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(parsed):
        return str(value)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _price_per_sqft(row: Dict[str, Any]) -> Optional[float]:
    prop = row.get("property") or {}
    value, sqft = prop.get("currentValue"), prop.get("squareFootage")
    if value and sqft:
        return value / sqft
    return None


def _owner_names(owners: Any) -> str:
    names = [owner.get("name") or "Unknown" for owner in owners or []]
    return ", ".join(names) or NOT_AVAILABLE


AVAILABLE_FIELDS: Sequence[ReportField] = (
    ReportField("property.address", "Address", "basic", "text"),
    ReportField("property.city", "City", "basic", "text"),
    ReportField("property.state", "State", "basic", "text"),
    ReportField("property.propertyType", "Property Type", "basic", "text"),
    ReportField(
        "property.squareFootage",
        "Square Footage",
        "basic",
        "number",
        formatter=lambda v: f"{format_number(v)} sq ft" if v else NOT_AVAILABLE,
    ),
    ReportField("property.bedrooms", "Bedrooms", "basic", "number"),
    ReportField("property.bathrooms", "Bathrooms", "basic", "number"),
    ReportField("property.yearBuilt", "Year Built", "basic", "number", formatter=lambda v: str(v)),
    ReportField(
        "property.currentValue",
        "Current Value",
        "financial",
        "currency",
        formatter=lambda v: f"${format_number(v)}" if v else NOT_AVAILABLE,
    ),
    ReportField(
        "pricePerSqFt",
        "Price per Sq Ft",
        "financial",
        "currency",
        formatter=lambda v: f"${int(round_half_up(v))}",
        getter=_price_per_sqft,
    ),
    ReportField("property.latitude", "Latitude", "location", "number", formatter=lambda v: f"{v:.6f}"),
    ReportField("property.longitude", "Longitude", "location", "number", formatter=lambda v: f"{v:.6f}"),
    ReportField("property.owners", "Owners", "ownership", "array", formatter=_owner_names),
    ReportField("notes", "Notes", "personal", "text"),
    ReportField(
        "tags",
        "Tags",
        "personal",
        "array",
        formatter=lambda v: ", ".join(v) if isinstance(v, list) else "",
    ),
    ReportField("createdAt", "Date Saved", "personal", "date"),
)

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
}
EXTENSIONS = {"pdf": "pdf", "excel": "xlsx", "csv": "csv", "json": "json"}


@dataclass(frozen=True)
class RenderedReport:
    filename: str
    content_type: str
    content: bytes


def report_filename(title: str, fmt: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE).lower()
    return f"{slug}.{EXTENSIONS[fmt]}"


def _compare_raw(a: Any, b: Any) -> int:
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return (a > b) - (a < b)
    left, right = str(a or ""), str(b or "")
    return (left > right) - (left < right)


class ReportService:
    def __init__(self, pdf_service: Optional[PDFService] = None) -> None:
        self.pdf_service = pdf_service or PDFService()

    def available_fields(self) -> List[ReportFieldPayload]:
        return [f.to_payload() for f in AVAILABLE_FIELDS]

    def generate(self, options: Any) -> RenderedReport:
        opts = self._coerce_options(options)
        fields = [f for f in AVAILABLE_FIELDS if f.key in opts.selected_fields]
        if not fields:
            raise InvalidInputError(f"No known report fields in {opts.selected_fields}")
        if len(opts.selected_properties) > REPORT_MAX_PROPERTIES:
            raise InvalidInputError(
                f"Report limited to {REPORT_MAX_PROPERTIES} properties, got {len(opts.selected_properties)}"
            )

        source_rows = [row.model_dump(by_alias=True) for row in opts.selected_properties]
        rows = self.prepare_rows(source_rows, fields, sort_by=opts.sort_by, sort_order=opts.sort_order)
        totals = self.currency_totals(source_rows, fields)

        with log_timing(LOGGER, "report_generate", format=opts.format, fields=len(fields), properties=len(rows)) as event:
            content = self._encode(opts, fields, rows, totals, len(source_rows))
            event["bytes"] = len(content)

        return RenderedReport(
            filename=report_filename(opts.title, opts.format),
            content_type=CONTENT_TYPES[opts.format],
            content=content,
        )

    def prepare_rows(
        self,
        source_rows: Sequence[Dict[str, Any]],
        fields: Sequence[ReportField],
        *,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Dict[str, str]]:
        """Format each saved property into a label -> display string row."""

        pairs = [(row, [f.raw_value(row) for f in fields]) for row in source_rows]
        sort_field = next((i for i, f in enumerate(fields) if f.key == sort_by), None)
        if sort_field is not None:
            pairs.sort(
                key=functools.cmp_to_key(lambda a, b: _compare_raw(a[1][sort_field], b[1][sort_field])),
                reverse=sort_order == "desc",
            )
        return [{f.label: f.render(raw) for f, raw in zip(fields, raws)} for _, raws in pairs]

    def currency_totals(
        self, source_rows: Sequence[Dict[str, Any]], fields: Sequence[ReportField]
    ) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        for f in fields:
            # derived per-unit fields are not summable
            if f.type != "currency" or f.getter is not None:
                continue
            total = sum(v for v in (f.raw_value(row) for row in source_rows) if isinstance(v, (int, float)))
            if total > 0:
                totals[f.label] = total
        return totals

    def _encode(
        self,
        opts: ReportOptions,
        fields: Sequence[ReportField],
        rows: List[Dict[str, str]],
        totals: Dict[str, float],
        property_count: int,
    ) -> bytes:
        if opts.format == "pdf":
            table = ReportTable(
                title=opts.title,
                headers=[f.label for f in fields],
                rows=[[row[f.label] for f in fields] for row in rows],
                right_aligned=[f.type in ("currency", "number") for f in fields],
                totals=totals,
                property_count=property_count,
            )
            return self.pdf_service.render(table)
        if opts.format == "excel":
            return self._excel(opts, fields, rows, totals)
        if opts.format == "csv":
            return self._csv(fields, rows)
        if opts.format == "json":
            return self._json(opts, rows)
        raise InvalidInputError(f"Unsupported format: {opts.format}")

    def _coerce_options(self, options: Any) -> ReportOptions:
        if isinstance(options, ReportOptions):
            return options
        if not isinstance(options, Mapping):
            raise InvalidInputError(f"report options must be a mapping, got {type(options).__name__}")
        try:
            return ReportOptions.model_validate(options)
        except ValidationError as exc:
            raise InvalidInputError(f"malformed report options: {exc}") from exc

    def _csv(self, fields: Sequence[ReportField], rows: List[Dict[str, str]]) -> bytes:
        frame = pd.DataFrame(rows, columns=[f.label for f in fields])
        return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n").encode("utf-8")

    def _json(self, opts: ReportOptions, rows: List[Dict[str, str]]) -> bytes:
        payload = {
            "metadata": {
                "title": opts.title,
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "totalProperties": len(opts.selected_properties),
                "fields": opts.selected_fields,
            },
            "properties": rows,
        }
        return json.dumps(payload, indent=2).encode("utf-8")

    def _excel(
        self,
        opts: ReportOptions,
        fields: Sequence[ReportField],
        rows: List[Dict[str, str]],
        totals: Dict[str, float],
    ) -> bytes:
        summary = [
            {"Metric": "Total Properties", "Value": len(opts.selected_properties)},
            {"Metric": "Report Generated", "Value": datetime.now(timezone.utc).date().isoformat()},
            {"Metric": "Report Title", "Value": opts.title},
        ]
        summary.extend({"Metric": f"Total {label}", "Value": f"${format_number(total)}"} for label, total in totals.items())

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            pd.DataFrame(rows, columns=[f.label for f in fields]).to_excel(writer, sheet_name="Properties", index=False)
            pd.DataFrame(summary, columns=["Metric", "Value"]).to_excel(writer, sheet_name="Summary", index=False)
            sheet = writer.sheets["Properties"]
            for idx, f in enumerate(fields, start=1):
                sheet.column_dimensions[get_column_letter(idx)].width = max(len(f.label) + 5, 15)
        return buffer.getvalue()


__all__ = [
    "AVAILABLE_FIELDS",
    "ReportField",
    "RenderedReport",
    "ReportService",
    "report_filename",
]
