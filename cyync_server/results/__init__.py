"""Results module: classification, normalization, and lookup result assembly."""
from .assembler import OrganizedResults, assemble_lookup_results, organize_results_by_type
from .classifier import KnownType, ResultKind, determine_result_type, get_results_for_entity, group_by_type
from .summary import build_metadata, count_by, create_summary_tags
from .transformers import TRANSFORMERS, is_recent, parse_timestamp, process_bucket

__all__ = [
    "OrganizedResults",
    "assemble_lookup_results",
    "organize_results_by_type",
    "KnownType",
    "ResultKind",
    "determine_result_type",
    "get_results_for_entity",
    "group_by_type",
    "build_metadata",
    "count_by",
    "create_summary_tags",
    "TRANSFORMERS",
    "is_recent",
    "parse_timestamp",
    "process_bucket",
]
