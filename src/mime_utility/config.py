"""
Library configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Library configuration from environment variables.

    Every setting can be overridden with an environment variable of the same
    name prefixed with ``MIME_UTILITY_`` (e.g. ``MIME_UTILITY_LOG_LEVEL``).
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Header folding
    header_fold_width: int = 76  # RFC 2047 / RFC 2822 recommended line width

    # Part tree traversal limits (untrusted wire data)
    max_part_depth: int = 64

    # Body decoding
    default_charset: str = "us-ascii"
    qp_read_chunk_size: int = 8192

    model_config = {
        "env_prefix": "MIME_UTILITY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
