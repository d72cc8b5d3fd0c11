from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SourceId = Literal["family_size", "bla_activity", "bla_performance", "timeline"]

SOURCE_IDS: tuple[SourceId, ...] = ("family_size", "bla_activity", "bla_performance", "timeline")


@dataclass(frozen=True)
class DatasetSchema:
    """Field contract for one dataset kind, in output column order."""

    kind: SourceId
    ac_fields: tuple[str, ...] = ()
    string_fields: tuple[str, ...] = ()
    int_fields: tuple[str, ...] = ()
    float_fields: tuple[str, ...] = ()
    date_fields: tuple[str, ...] = ()
    column_order: tuple[str, ...] = ()


FAMILY_SIZE_SCHEMA = DatasetSchema(
    kind="family_size",
    ac_fields=("ac_no",),
    string_fields=("booth_no",),
    int_fields=(
        "family_size",
        "total_families",
        "families_with_verified",
        "families_with_unverified",
        "is_small_family",
        "is_large_family",
    ),
    column_order=(
        "ac_no",
        "booth_no",
        "family_size",
        "total_families",
        "families_with_verified",
        "families_with_unverified",
        "is_small_family",
        "is_large_family",
    ),
)

BLA_ACTIVITY_SCHEMA = DatasetSchema(
    kind="bla_activity",
    ac_fields=("ac_no",),
    string_fields=("bla_id", "bla_name", "phone_numbers"),
    int_fields=("unique_phone_numbers_added",),
    date_fields=("date",),
    column_order=(
        "ac_no",
        "date",
        "bla_id",
        "bla_name",
        "unique_phone_numbers_added",
        "phone_numbers",
    ),
)

BLA_PERFORMANCE_SCHEMA = DatasetSchema(
    kind="bla_performance",
    string_fields=("bla_id", "bla_name"),
    int_fields=("total_families_created", "total_verified_members", "acs_worked", "booths_worked"),
    float_fields=(
        "avg_duration_minutes",
        "median_duration_minutes",
        "min_duration_minutes",
        "max_duration_minutes",
        "avg_family_size",
    ),
    column_order=(
        "bla_id",
        "bla_name",
        "total_families_created",
        "avg_duration_minutes",
        "median_duration_minutes",
        "min_duration_minutes",
        "max_duration_minutes",
        "avg_family_size",
        "total_verified_members",
        "acs_worked",
        "booths_worked",
    ),
)

TIMELINE_SCHEMA = DatasetSchema(
    kind="timeline",
    ac_fields=("ac_no",),
    string_fields=("booth_no", "family_id", "bla_id", "bla_name"),
    int_fields=("family_size", "verified_count", "start_hour"),
    float_fields=("creation_duration_minutes",),
    date_fields=("first_member_time", "last_member_time", "date"),
    column_order=(
        "ac_no",
        "booth_no",
        "family_id",
        "family_size",
        "verified_count",
        "bla_id",
        "bla_name",
        "first_member_time",
        "last_member_time",
        "creation_duration_minutes",
        "date",
        "start_hour",
    ),
)

SCHEMAS: dict[str, DatasetSchema] = {
    schema.kind: schema
    for schema in (
        FAMILY_SIZE_SCHEMA,
        BLA_ACTIVITY_SCHEMA,
        BLA_PERFORMANCE_SCHEMA,
        TIMELINE_SCHEMA,
    )
}


def schema_for(kind: str) -> DatasetSchema:
    try:
        return SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"Unknown dataset kind: {kind}") from None
