from .validators import normalize_device, parse_beam_size, parse_hotwords, split_and_trim, validate_result
from .helpers import FILENAME_SEPARATOR, build_file_name, generate_job_id, sanitize_filename, split_file_name

__all__ = [
    "normalize_device",
    "parse_beam_size",
    "parse_hotwords",
    "split_and_trim",
    "validate_result",
    "FILENAME_SEPARATOR",
    "build_file_name",
    "generate_job_id",
    "sanitize_filename",
    "split_file_name",
]
