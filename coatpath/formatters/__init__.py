"""Output formatters for the G-code emitter.

Formatters share the MoveFormatter protocol and are chosen per run through
CoatingSettings.output_format:

- PlainFormatter: body lines only (default)
- AnnotatedHeaderFormatter: sentinel-delimited move table, then the body

Usage:
    from coatpath.formatters import create_formatter

    formatter = create_formatter(settings)
    line = formatter.format_move(move)
"""
from .base import MoveFormatter, create_formatter
from .plain import PlainFormatter
from .annotated import AnnotatedHeaderFormatter, HEADER_BEGIN, HEADER_END

__all__ = [
    'MoveFormatter',
    'create_formatter',
    'PlainFormatter',
    'AnnotatedHeaderFormatter',
    'HEADER_BEGIN',
    'HEADER_END',
]
