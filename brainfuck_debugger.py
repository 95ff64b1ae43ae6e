#!/usr/bin/env python3
"""
Brainfuck Step-by-Step Debugger

Shows the step-by-step execution of a program, displaying the state of the
memory tape, the program with the current instruction marked, and the output
produced so far after each step.
"""

import sys
from typing import IO, List, Optional, Sequence

from brainfuck import BrainfuckInterpreter, ExecutionContext, InterpreterConfig, Program
from core.assembler import assemble_source
from core.faults import StepLimitExceeded
from core.instructions import Instruction
from core.tape_io import BufferedInput, BufferedOutput


class BrainfuckDebugger(BrainfuckInterpreter):
    """Interpreter that renders its state after every step."""

    def __init__(
        self,
        memory_size: int = 30,
        show_memory_range: int = 10,
        max_steps: int = 100,
        strict: bool = False,
        out: Optional[IO[str]] = None,
    ):
        super().__init__(InterpreterConfig(tape_size=memory_size, strict=strict, max_steps=max_steps))
        self.show_memory_range = show_memory_range
        self.out = out if out is not None else sys.stdout
        self._stream: Sequence[Instruction] = ()
        self._output: Optional[BufferedOutput] = None

    def debug_run(self, program: Program, input_data: bytes = b"") -> bytes:
        """Execute a program with in-memory input, printing state after each step."""
        self._stream = assemble_source(program) if isinstance(program, str) else tuple(program)
        self._output = BufferedOutput()

        print("BRAINFUCK DEBUGGER", file=self.out)
        print(f"Program: {''.join(str(inst) for inst in self._stream)}", file=self.out)
        print(f"Input: {list(input_data)}", file=self.out)
        print("=" * 80, file=self.out)

        self.out.write(self.render_state(ExecutionContext.fresh(self.config.tape_size), "INITIAL"))
        try:
            self.run(self._stream, BufferedInput(input_data), self._output)
        except StepLimitExceeded:
            print(f"\nExecution stopped after {self.config.max_steps} steps (possible infinite loop)", file=self.out)

        result = self._output.getvalue()
        print(f"\nFINAL RESULT: {list(result)}", file=self.out)
        return result

    def _on_step(self, ctx: ExecutionContext, inst: Instruction) -> None:
        self.out.write(f"\nStep {ctx.steps}: Execute '{inst}' from line {inst.source_line}\n")
        self.out.write(self.render_state(ctx, f"AFTER STEP {ctx.steps}"))

    def render_state(self, ctx: ExecutionContext, label: str) -> str:
        """Render program, memory window and output for one context."""
        lines: List[str] = [f"\n{label}:"]

        program_display = ""
        for i, inst in enumerate(self._stream):
            if i == ctx.instruction_pointer:
                program_display += f"[{inst}]"
            else:
                program_display += str(inst)
        if ctx.instruction_pointer >= len(self._stream):
            program_display += "[HALT]"
        lines.append(f"Program:  {program_display}")

        # Memory window focused around the pointer
        size = len(ctx.tape)
        start = max(0, ctx.data_pointer - self.show_memory_range // 2)
        end = min(size, start + self.show_memory_range)
        if end - start < self.show_memory_range:
            start = max(0, end - self.show_memory_range)

        window = range(start, end)
        lines.append("Memory:   [" + "|".join(f"{int(ctx.tape[i]):3d}" for i in window) + "]")
        lines.append("Pointer:   " + " ".join(" ^ " if i == ctx.data_pointer else "   " for i in window))
        lines.append("Address:   " + " ".join(f"{i:3d}" for i in window))

        output = self._output.getvalue() if self._output is not None else b""
        if output:
            lines.append(f"Output:   {list(output)}")
        else:
            lines.append("Output:   (empty)")
        return "\n".join(lines) + "\n"


if __name__ == "__main__":
    debugger = BrainfuckDebugger(memory_size=15, show_memory_range=6)

    print("EXAMPLE 1: Simple increment (f(x) = x + 1)")
    debugger.debug_run(",+.", bytes([3]))

    print("\n" + "=" * 80)
    print("\nEXAMPLE 2: Doubling program (f(x) = 2*x)")
    debugger.debug_run(",[>++<-]>.", bytes([3]))
