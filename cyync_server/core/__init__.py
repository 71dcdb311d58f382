"""Core module: configuration, errors, logging, preprocessing, and the lookup pipeline."""
from .config import (
    API_PREFIX,
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SEARCH_LIMIT,
    SEARCH_RESPONSE_PATH,
    SUCCESS_STATUS_CODES,
    get_concurrency_limit,
    get_cyync_config,
    get_log_dir,
    get_request_timeout,
    get_search_limit,
)
from .error import (
    CyyncError,
    CyyncLookupError,
    ErrorType,
    TransportError,
    classify_error,
    format_transport_failure,
    log_error,
    parse_error_to_readable_json,
    translate_transport_error,
)
from .logger import get_logger, setup_logger
from .preprocessor import get_entities_of_types, normalize_options, remove_private_ips, validate_options
from .pipeline import run_lookup

__all__ = [
    # Pipeline
    "run_lookup",
    # Config
    "API_PREFIX",
    "DEFAULT_CONCURRENCY_LIMIT",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_SEARCH_LIMIT",
    "SEARCH_RESPONSE_PATH",
    "SUCCESS_STATUS_CODES",
    "get_concurrency_limit",
    "get_cyync_config",
    "get_log_dir",
    "get_request_timeout",
    "get_search_limit",
    # Preprocessing
    "get_entities_of_types",
    "normalize_options",
    "remove_private_ips",
    "validate_options",
    # Error handling
    "CyyncError",
    "CyyncLookupError",
    "ErrorType",
    "TransportError",
    "classify_error",
    "format_transport_failure",
    "log_error",
    "parse_error_to_readable_json",
    "translate_transport_error",
    # Logging
    "setup_logger",
    "get_logger",
]
