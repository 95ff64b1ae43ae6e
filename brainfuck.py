#!/usr/bin/env python3
"""
Brainfuck Interpreter

Brainfuck is an esoteric programming language with only 8 commands:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Input a byte and store it in the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back past the matching [ if the cell at the pointer is nonzero

The tape is a fixed array of 32768 unsigned bytes. In the default permissive
mode the pointer and the cells wrap around at their bounds; in strict mode
every boundary crossing is a fatal fault reported with its source line.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from core.assembler import assemble_source
from core.faults import (
    CellOverflow,
    CellUnderflow,
    InputFailure,
    PointerOverflow,
    PointerUnderflow,
    StepLimitExceeded,
)
from core.instructions import Instruction, Opcode
from core.tape_io import BufferedInput, BufferedOutput, InputSource, OutputSink, StreamOutput, TerminalInput

logger = logging.getLogger(__name__)

TAPE_SIZE = 32768
DEBUG_STEP_LIMIT = 50  # only trace the first steps of a run

Program = Union[str, Sequence[Instruction]]


@dataclass
class InterpreterConfig:
    tape_size: int = TAPE_SIZE
    strict: bool = False
    max_steps: Optional[int] = None
    debug: bool = False


@dataclass
class ExecutionContext:
    """All mutable state of a single run."""
    tape: np.ndarray
    data_pointer: int = 0
    instruction_pointer: int = 0
    steps: int = 0
    input_reads: int = 0
    output_writes: int = 0

    @classmethod
    def fresh(cls, tape_size: int = TAPE_SIZE) -> "ExecutionContext":
        return cls(tape=np.zeros(tape_size, dtype=np.uint8))

    @property
    def cell(self) -> int:
        return int(self.tape[self.data_pointer])

    @cell.setter
    def cell(self, value: int) -> None:
        self.tape[self.data_pointer] = value


class BrainfuckInterpreter:
    def __init__(self, config: Optional[InterpreterConfig] = None):
        self.config = config or InterpreterConfig()
        if self.config.tape_size < 1:
            raise ValueError("tape_size must be at least 1")

    def run(
        self,
        program: Program,
        input_source: Optional[InputSource] = None,
        output_sink: Optional[OutputSink] = None,
    ) -> ExecutionContext:
        """Execute a program until the instruction pointer runs off the end.

        `program` is either source text or an already assembled stream.
        Returns the final execution context. Any RuntimeFault propagates
        immediately and leaves the remaining instructions unexecuted.
        """
        stream = assemble_source(program) if isinstance(program, str) else program
        input_source = input_source if input_source is not None else TerminalInput()
        output_sink = output_sink if output_sink is not None else StreamOutput()

        ctx = ExecutionContext.fresh(self.config.tape_size)
        max_steps = self.config.max_steps

        while ctx.instruction_pointer < len(stream):
            inst = stream[ctx.instruction_pointer]
            if max_steps is not None and ctx.steps >= max_steps:
                raise StepLimitExceeded(inst.source_line, f"{max_steps} steps")

            ctx.instruction_pointer = self._execute(ctx, inst, input_source, output_sink)
            ctx.steps += 1
            self._on_step(ctx, inst)

        return ctx

    def _execute(
        self,
        ctx: ExecutionContext,
        inst: Instruction,
        input_source: InputSource,
        output_sink: OutputSink,
    ) -> int:
        """Apply one instruction and return the next instruction pointer."""
        strict = self.config.strict
        last_cell = len(ctx.tape) - 1
        op = inst.opcode
        ip = ctx.instruction_pointer

        if op is Opcode.MOVE_LEFT:
            if ctx.data_pointer > 0:
                ctx.data_pointer -= 1
            elif strict:
                raise PointerUnderflow(inst.source_line)
            else:
                ctx.data_pointer = last_cell

        elif op is Opcode.MOVE_RIGHT:
            if ctx.data_pointer < last_cell:
                ctx.data_pointer += 1
            elif strict:
                raise PointerOverflow(inst.source_line)
            else:
                ctx.data_pointer = 0

        elif op is Opcode.INCREMENT:
            value = ctx.cell
            if strict and value == 255:
                raise CellOverflow(inst.source_line)
            ctx.cell = (value + 1) % 256

        elif op is Opcode.DECREMENT:
            value = ctx.cell
            if strict and value == 0:
                raise CellUnderflow(inst.source_line)
            ctx.cell = (value - 1) % 256

        elif op is Opcode.OUTPUT:
            output_sink.write_byte(ctx.cell)
            ctx.output_writes += 1

        elif op is Opcode.INPUT:
            try:
                value = input_source.read_byte()
            except (EOFError, OSError) as e:
                raise InputFailure(inst.source_line, str(e)) from e
            if not 0 <= value <= 255:
                raise InputFailure(inst.source_line, f"not a byte: {value!r}")
            ctx.cell = value
            ctx.input_reads += 1

        elif op is Opcode.LOOP_OPEN:
            if ctx.cell == 0:
                return inst.jump_target + 1

        elif op is Opcode.LOOP_CLOSE:
            if ctx.cell != 0:
                return inst.jump_target + 1

        else:
            logger.warning("Unknown instruction at line %d, skipping: %s", inst.source_line, op)

        return ip + 1

    def _on_step(self, ctx: ExecutionContext, inst: Instruction) -> None:
        """Called after every executed instruction."""
        if self.config.debug and ctx.steps <= DEBUG_STEP_LIMIT:
            logger.debug(
                "Step %2d: CMD=%r IP=%d PTR=%d CELL=%d MEM=%s",
                ctx.steps, str(inst), ctx.instruction_pointer, ctx.data_pointer,
                ctx.cell, ctx.tape[:5].tolist(),
            )


def execute(
    stream: Sequence[Instruction],
    strict: bool = False,
    input_source: Optional[InputSource] = None,
    output_sink: Optional[OutputSink] = None,
    tape_size: int = TAPE_SIZE,
) -> ExecutionContext:
    """Run an assembled stream with a fresh tape."""
    config = InterpreterConfig(tape_size=tape_size, strict=strict)
    return BrainfuckInterpreter(config).run(stream, input_source, output_sink)


def run_source(
    code: str,
    input_data: bytes = b"",
    strict: bool = False,
    max_steps: Optional[int] = None,
) -> bytes:
    """Assemble and run source text against in-memory input, returning the output bytes."""
    config = InterpreterConfig(strict=strict, max_steps=max_steps)
    sink = BufferedOutput()
    BrainfuckInterpreter(config).run(code, BufferedInput(input_data), sink)
    return sink.getvalue()
