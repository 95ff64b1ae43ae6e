"""
Assembler: turns source lines into an instruction stream.

Comments run from any of '#', '/' or ';' to the end of the line. Whitespace
is skipped and any other unknown character is reported and ignored. Loop
brackets are paired with an explicit stack so every '[' and ']' carries the
index of its partner, which lets the interpreter jump in O(1).
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Tuple

from core.faults import UnmatchedCloseError, UnmatchedOpenError
from core.instructions import CharClass, Instruction, Opcode, classify_char, split_source_lines

logger = logging.getLogger(__name__)


def assemble(lines: Iterable[str]) -> Tuple[Instruction, ...]:
    """Assemble ordered source lines into an immutable instruction stream.

    Raises UnmatchedCloseError on a ']' with no open scope, and
    UnmatchedOpenError if any '[' is still open after the last line.
    """
    stream: List[Instruction] = []
    scope_open: List[int] = []

    for line_num, line in enumerate(lines, start=1):
        for ch in line:
            cls = classify_char(ch)
            if cls is CharClass.COMMENT:
                break
            elif cls is CharClass.WHITESPACE:
                continue
            elif cls is CharClass.UNRECOGNIZED:
                logger.warning("Unknown character on line %d, ignoring: %r", line_num, ch)
                continue

            opcode = Opcode(ch)
            index = len(stream)
            if opcode is Opcode.LOOP_OPEN:
                stream.append(Instruction(opcode, line_num))
                scope_open.append(index)
            elif opcode is Opcode.LOOP_CLOSE:
                if not scope_open:
                    raise UnmatchedCloseError(line_num)
                open_index = scope_open.pop()
                stream[open_index] = replace(stream[open_index], jump_target=index)
                stream.append(Instruction(opcode, line_num, jump_target=open_index))
            else:
                stream.append(Instruction(opcode, line_num))

    # ensure no dangling '['
    if scope_open:
        raise UnmatchedOpenError(stream[scope_open[-1]].source_line)

    logger.debug("Assembled %d instructions", len(stream))
    return tuple(stream)


def assemble_source(text: str) -> Tuple[Instruction, ...]:
    """Assemble a whole program given as one string."""
    return assemble(split_source_lines(text))
