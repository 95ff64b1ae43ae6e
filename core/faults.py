from typing import Optional


class BrainfuckError(Exception):
    """Base class for every fatal interpreter error."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class AssemblyError(BrainfuckError):
    pass


class UnmatchedCloseError(AssemblyError):
    def __init__(self, line: int):
        super().__init__(f"Unmatched ']' on line {line}", line)


class UnmatchedOpenError(AssemblyError):
    def __init__(self, line: int):
        super().__init__(f"Unmatched '[' opened on line {line}", line)


class RuntimeFault(BrainfuckError):
    """Raised mid-run; the run cannot continue past it."""

    description = "runtime fault"

    def __init__(self, line: int, detail: str = ""):
        message = f"{self.description} at line {line}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, line)


class PointerUnderflow(RuntimeFault):
    description = "Attempted data pointer underflow in strict mode"


class PointerOverflow(RuntimeFault):
    description = "Attempted data pointer overflow in strict mode"


class CellOverflow(RuntimeFault):
    description = "Attempted data cell overflow in strict mode"


class CellUnderflow(RuntimeFault):
    description = "Attempted data cell underflow in strict mode"


class InputFailure(RuntimeFault):
    description = "Failure to read input byte"


class StepLimitExceeded(RuntimeFault):
    description = "Step limit exceeded"
