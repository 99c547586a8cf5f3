"""Configuration validation."""

import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

VALID_HASHFILE_TYPES = ['sfv', 'md5', 'sha1', 'sha256', 'sha384', 'sha512', 'spamsum']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    # Validate logging section
    errors.extend(_validate_logging(config.get('logging', {})))

    # Validate parsing section
    errors.extend(_validate_parsing(config.get('parsing', {})))

    # Validate writing section
    errors.extend(_validate_writing(config.get('writing', {})))

    # Validate hashfile section
    errors.extend(_validate_hashfile(config.get('hashfile', {})))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_section_type(name: str, section: Any) -> List[str]:
    if not isinstance(section, dict):
        return [f"{name} must be a mapping"]
    return []


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = _validate_section_type('logging', section)
    if errors:
        return errors

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}, got {level!r}"
        )

    if 'console' in section and not isinstance(section['console'], bool):
        errors.append("logging.console must be true or false")

    log_file = section.get('file')
    if log_file is not None and not isinstance(log_file, str):
        errors.append("logging.file must be a path string")

    return errors


def _validate_parsing(section: Dict[str, Any]) -> List[str]:
    """Validate parsing section."""
    errors = _validate_section_type('parsing', section)
    if errors:
        return errors

    if 'strict' in section and not isinstance(section['strict'], bool):
        errors.append("parsing.strict must be true or false")

    return errors


def _validate_writing(section: Dict[str, Any]) -> List[str]:
    """Validate writing section."""
    errors = _validate_section_type('writing', section)
    if errors:
        return errors

    for key in ('clrmamepro_quotes', 'separated_value_quotes', 'preserve_extras'):
        if key in section and not isinstance(section[key], bool):
            errors.append(f"writing.{key} must be true or false")

    return errors


def _validate_hashfile(section: Dict[str, Any]) -> List[str]:
    """Validate hashfile section."""
    errors = _validate_section_type('hashfile', section)
    if errors:
        return errors

    default_type = section.get('default_type', 'sfv')
    if default_type not in VALID_HASHFILE_TYPES:
        errors.append(
            f"hashfile.default_type must be one of {', '.join(VALID_HASHFILE_TYPES)}, "
            f"got {default_type!r}"
        )

    return errors
