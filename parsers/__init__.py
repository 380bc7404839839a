"""FIT file parsing."""

from .fit_parser import DecoderConfig, FitDecoder, FitFileValidationError, inspect_fields, is_fit_file, validate_fit_file

__all__ = ['DecoderConfig', 'FitDecoder', 'FitFileValidationError', 'inspect_fields', 'is_fit_file', 'validate_fit_file']
