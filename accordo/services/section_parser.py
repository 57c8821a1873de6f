"""Heading-based splitting of raw contract text into titled sections.

A heading is any non-empty line without lower-case letters that ends in a
colon. The rule is deliberately loose: an all-caps quoted line ending in a
colon also opens a new section. Clause substitution matches on the titles
this parser produces, so the two must stay in step.
"""

import re

PREAMBLE_TITLE = "Preamble"
PARAGRAPH_SEPARATOR = "\n\n"

# C0 controls except tab, newline and carriage return, plus DEL and C1.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")
_ANGLE_BRACKETS = re.compile(r"[<>]")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")


def sanitize_text(text: str) -> str:
    """Normalize text before parsing or rendering it into markup."""
    clean = _CONTROL_CHARS.sub("", text or "")
    clean = _ANGLE_BRACKETS.sub("_", clean)
    clean = _HORIZONTAL_SPACE.sub(" ", clean)
    clean = clean.replace("\r\n", "\n").replace("\r", "\n")
    return clean.strip()


def is_section_heading(line: str) -> bool:
    return bool(line) and line.upper() == line and line.endswith(":")


def parse_contract_sections(text: str) -> dict[str, str]:
    """Return section title -> body in order of appearance.

    Body lines are joined with a blank line. Text before the first heading is
    collected under ``Preamble``; sections whose body is empty are omitted.
    A repeated title keeps its first position and takes the later body.
    """
    sections: dict[str, str] = {}
    current = PREAMBLE_TITLE
    buffer: list[str] = []

    for raw_line in sanitize_text(text).split("\n"):
        line = raw_line.strip()
        if is_section_heading(line):
            if buffer:
                sections[current] = PARAGRAPH_SEPARATOR.join(buffer)
            current = line[:-1]
            buffer = []
        elif line:
            buffer.append(line)

    if buffer:
        sections[current] = PARAGRAPH_SEPARATOR.join(buffer)
    return sections
