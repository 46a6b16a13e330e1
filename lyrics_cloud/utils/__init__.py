"""
Utilities package
Common helpers, logging, and validation functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    create_operation_logger,
    log_performance,
    get_current_log_file
)
from .helpers import (
    clean_lyrics_text,
    sanitize_name_component,
    create_export_filename,
    genius_search_url,
    web_search_url,
    ensure_directory,
    get_current_timestamp,
    truncate_string
)
from .validation import (
    validate_query,
    validate_search_term,
    validate_output_directory,
    validate_port
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'create_operation_logger',
    'log_performance',
    'get_current_log_file',

    # Helper exports
    'clean_lyrics_text',
    'sanitize_name_component',
    'create_export_filename',
    'genius_search_url',
    'web_search_url',
    'ensure_directory',
    'get_current_timestamp',
    'truncate_string',

    # Validation exports
    'validate_query',
    'validate_search_term',
    'validate_output_directory',
    'validate_port',
]
