from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

# Instruction set shared by the assembler and the interpreter

COMMENT_CHARS = "#/;"
# ASCII file/group/record/unit separators: str.isspace() accepts them, but
# they are not whitespace in program text
SEPARATOR_CHARS = "\x1c\x1d\x1e\x1f"


class Opcode(Enum):
    MOVE_LEFT = '<'
    MOVE_RIGHT = '>'
    INCREMENT = '+'
    DECREMENT = '-'
    OUTPUT = '.'
    INPUT = ','
    LOOP_OPEN = '['
    LOOP_CLOSE = ']'


OPCODE_CHARS = "".join(op.value for op in Opcode)


class CharClass(Enum):
    OPCODE = "opcode"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    UNRECOGNIZED = "unrecognized"


def classify_char(ch: str) -> CharClass:
    """Map a single source character to its class."""
    if ch in OPCODE_CHARS:
        return CharClass.OPCODE
    if ch in COMMENT_CHARS:
        return CharClass.COMMENT
    if ch.isspace() and ch not in SEPARATOR_CHARS:
        return CharClass.WHITESPACE
    return CharClass.UNRECOGNIZED


def split_source_lines(text: str) -> List[str]:
    """Split program text on '\\n' only, dropping one trailing '\\r' per line.

    Form feeds, '\\u2028' and other characters str.splitlines() treats as
    line breaks stay inside the line, so a comment still runs to the '\\n'.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass(frozen=True)
class Instruction:
    """One executable unit. jump_target is set only on loop brackets."""
    opcode: Opcode
    source_line: int
    jump_target: Optional[int] = None

    def __str__(self) -> str:
        return getattr(self.opcode, "value", str(self.opcode))
