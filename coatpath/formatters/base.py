"""Base protocol and factory for G-code output formatters.

The emitter decides which moves are accepted; a formatter decides how the
accepted moves are written out. Every formatter implements the
MoveFormatter protocol and is selected by CoatingSettings.output_format.
"""
from typing import Protocol, List, TYPE_CHECKING

from ..models import MoveRecord

if TYPE_CHECKING:
    from ..models import CoatingSettings


class MoveFormatter(Protocol):
    """Protocol for turning accepted moves into program text.

    Methods:
        format_move: Render one move as a single G-code line
        render: Join the body lines into the final program body
    """

    def format_move(self, move: MoveRecord) -> str:
        """Render one accepted move.

        Args:
            move: MoveRecord with command, feed and mm coordinates

        Returns:
            A single G-code line without trailing newline
        """
        ...

    def render(self, lines: List[str], moves: List[MoveRecord]) -> str:
        """Produce the body text.

        Args:
            lines: Every body line in emission order (moves and M-codes)
            moves: Every accepted move in emission order

        Returns:
            Body text, newline-terminated when not empty
        """
        ...


def create_formatter(settings: 'CoatingSettings') -> MoveFormatter:
    """Factory function returning the formatter for settings.output_format.

    Args:
        settings: CoatingSettings with output_format 'plain' or 'annotated'

    Returns:
        MoveFormatter implementation

    Raises:
        ValueError: For an unknown output format
    """
    # Import here to avoid circular imports
    from .plain import PlainFormatter
    from .annotated import AnnotatedHeaderFormatter

    formatters = {
        'plain': PlainFormatter,
        'annotated': AnnotatedHeaderFormatter,
    }
    formatter_class = formatters.get(settings.output_format)
    if formatter_class is None:
        raise ValueError(f"Unknown output format: {settings.output_format}")
    return formatter_class(settings)
