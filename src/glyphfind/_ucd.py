"""Unicode character records and UnicodeData.txt loading."""

from __future__ import annotations

import logging
import sys
import unicodedata
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path

from glyphfind._errors import DatasetError

logger = logging.getLogger(__name__)

REPLACEMENT_CHARACTER = "\ufffd"
MAX_CODEPOINT = 0x10FFFF


class GeneralCategory(Enum):
    """Unicode General_Category values, keyed by their two-letter code.

    See https://www.unicode.org/reports/tr44/#General_Category_Values
    """

    LETTER_UPPERCASE = "Lu"
    LETTER_LOWERCASE = "Ll"
    LETTER_TITLECASE = "Lt"
    LETTER_MODIFIER = "Lm"
    LETTER_OTHER = "Lo"
    MARK_NONSPACING = "Mn"
    MARK_SPACING_COMBINING = "Mc"
    MARK_ENCLOSING = "Me"
    NUMBER_DECIMAL_DIGIT = "Nd"
    NUMBER_LETTER = "Nl"
    NUMBER_OTHER = "No"
    PUNCTUATION_CONNECTOR = "Pc"
    PUNCTUATION_DASH = "Pd"
    PUNCTUATION_OPEN = "Ps"
    PUNCTUATION_CLOSE = "Pe"
    PUNCTUATION_INITIAL_QUOTE = "Pi"
    PUNCTUATION_FINAL_QUOTE = "Pf"
    PUNCTUATION_OTHER = "Po"
    SYMBOL_MATH = "Sm"
    SYMBOL_CURRENCY = "Sc"
    SYMBOL_MODIFIER = "Sk"
    SYMBOL_OTHER = "So"
    SEPARATOR_SPACE = "Zs"
    SEPARATOR_LINE = "Zl"
    SEPARATOR_PARAGRAPH = "Zp"
    OTHER_CONTROL = "Cc"
    OTHER_FORMAT = "Cf"
    OTHER_SURROGATE = "Cs"
    OTHER_PRIVATE_USE = "Co"
    OTHER_NOT_ASSIGNED = "Cn"

    @classmethod
    def from_code(cls, code: str) -> GeneralCategory:
        """Map a two-letter code to its category, defaulting to Cn."""
        try:
            return cls(code.strip())
        except ValueError:
            return cls.OTHER_NOT_ASSIGNED


def format_codepoint(codepoint: int) -> str:
    """Format as ``U+`` and at least four uppercase hex digits."""
    return f"U+{codepoint:04X}"


def is_scalar_value(codepoint: int) -> bool:
    return 0 <= codepoint <= MAX_CODEPOINT and not 0xD800 <= codepoint <= 0xDFFF


def fold_case(text: str) -> str:
    """Lowercase ``text`` one character at a time, keeping its length."""
    folded = []
    for ch in text:
        low = ch.lower()
        folded.append(low if len(low) == 1 else ch)
    return "".join(folded)


def word_heads(text: str) -> bytes:
    """Flag each position of ``text`` that starts a word, one byte per character.

    A head is the first character, any character after a non-alphanumeric
    one, a non-alphanumeric character itself, or an uppercase letter that
    follows a lowercase one.
    """
    heads = bytearray(len(text))
    prev = ""
    for i, ch in enumerate(text):
        heads[i] = (
            not prev
            or not prev.isalnum()
            or not ch.isalnum()
            or (prev.islower() and ch.isupper())
        )
        prev = ch
    return bytes(heads)


@dataclass(frozen=True)
class Entry:
    """A single character record."""

    codepoint: int
    name: str
    category: GeneralCategory = GeneralCategory.OTHER_NOT_ASSIGNED
    legacy_name: str = ""  # Unicode 1.0 name, mostly set for controls

    @property
    def glyph(self) -> str:
        if is_scalar_value(self.codepoint):
            return chr(self.codepoint)
        return REPLACEMENT_CHARACTER

    @property
    def formatted_codepoint(self) -> str:
        return format_codepoint(self.codepoint)

    @cached_property
    def search_text(self) -> str:
        """Composite string the ranker matches queries against."""
        return f"{self.formatted_codepoint} {self.name} {self.legacy_name}"

    @cached_property
    def search_key(self) -> str:
        """Case-folded ``search_text``, position for position."""
        return fold_case(self.search_text)

    @cached_property
    def search_heads(self) -> bytes:
        return word_heads(self.search_text)


def parse_ucd_line(line: str) -> Entry | None:
    """
    Parse one line of UnicodeData.txt.

    Returns None when the line has no usable codepoint or name field.
    """
    fields = line.strip().split(";")
    if len(fields) < 2 or not fields[0]:
        return None

    try:
        codepoint = int(fields[0], 16)
    except ValueError:
        return None

    category = GeneralCategory.from_code(fields[2] if len(fields) > 2 else "")
    legacy_name = fields[10] if len(fields) > 10 else ""

    return Entry(
        codepoint=codepoint,
        name=fields[1],
        category=category,
        legacy_name=legacy_name,
    )


def load_ucd(path: str | Path) -> list[Entry]:
    """
    Load entries from a UnicodeData.txt file.

    Args:
        path: File in the semicolon separated UCD format

    Returns:
        Entries in file order, malformed lines skipped

    Raises:
        DatasetError: If the file cannot be read
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetError(f"Error reading unicode data file '{path}': {e}") from e

    entries = []
    skipped = 0
    for line in content.strip().split("\n"):
        entry = parse_ucd_line(line)
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)

    if skipped:
        logger.debug("Skipped %d malformed lines in %s", skipped, path)
    logger.info("Loaded %d entries from %s", len(entries), path)
    return entries


def builtin_entries() -> list[Entry]:
    """Build entries from the interpreter's own Unicode tables.

    Covers every scalar value that has a name. Legacy names are not
    available here and are left empty.
    """
    entries = []
    for codepoint in range(sys.maxunicode + 1):
        if not is_scalar_value(codepoint):
            continue

        char = chr(codepoint)
        name = unicodedata.name(char, "")
        if not name:
            continue

        entries.append(
            Entry(
                codepoint=codepoint,
                name=name,
                category=GeneralCategory.from_code(unicodedata.category(char)),
            )
        )

    logger.info(
        "Loaded %d entries from unicodedata %s", len(entries), unicodedata.unidata_version
    )
    return entries
