"""Module list parsing.

A module list is plain text with one entry per line. Entries are either a
single module code (or name) on its own line, or a bracketed list in the style
of the challenge bomb spreadsheets::

    mod1
    [mod2, mod3, mod4]
    ALL_SOLVABLE

Sentinel tokens are dropped from the result wherever they appear.
"""

import logging
from pathlib import Path

from .errors import ListFormatError
from .errors import ProfileIOError

logger = logging.getLogger(__name__)

SENTINEL_TOKENS = frozenset({"ALL_SOLVABLE", "ALL_NEEDY"})
TOKEN_SEPARATOR = ", "

# Lines without a single character in this code point range carry no tokens
_INFORMATIVE_MIN = 48
_INFORMATIVE_MAX = 122


def is_informative(line: str) -> bool:
    """Return True if the line holds at least one digit, letter or related symbol."""
    return any(_INFORMATIVE_MIN <= ord(ch) <= _INFORMATIVE_MAX for ch in line)


class ModuleListParser:
    """Parses module list text into raw tokens (codes or display names)."""

    def parse(self, text: str) -> list[str]:
        """Parse module list text.

        Args:
            text: Full content of a module list

        Returns:
            Tokens in source order, duplicates kept, sentinels removed

        Raises:
            ListFormatError: If a bracket line is opened but never closed
        """
        tokens: list[str] = []

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            if not is_informative(raw_line):
                continue

            line = raw_line.strip()
            if not line.startswith("["):
                tokens.append(line)
                continue

            end = line.find("]")
            if end == -1:
                raise ListFormatError(f"Badly formatted module list: unclosed '[' on line {line_number}", line_number)

            for token in line[1:end].split(TOKEN_SEPARATOR):
                token = token.strip()
                if token:
                    tokens.append(token)

        result = [token for token in tokens if token not in SENTINEL_TOKENS]
        if len(result) != len(tokens):
            logger.debug(f"Dropped {len(tokens) - len(result)} sentinel tokens")
        return result

    def parse_file(self, path: Path) -> list[str]:
        """Read a UTF-8 module list file and parse it.

        Raises:
            ProfileIOError: If the file cannot be read
            ListFormatError: If the list is badly formatted
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ProfileIOError(f"Cannot read module list {path}: {e}") from e

        tokens = self.parse(text)
        logger.debug(f"Parsed {len(tokens)} tokens from {path}")
        return tokens
