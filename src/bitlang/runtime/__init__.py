"""
Runtime - Tree-walking interpreter for BIT programs.

This module provides:
- Interpreter: Runs a loaded program line by line
- Value: Runtime values (bits and addresses)
- ExecutionContext: Memory, variables and the jump register for one run
"""

from .values import (
    Address,
    Value,
    bit_val,
    is_address,
    describe,
)

from .context import (
    VariableKind,
    VariableSlot,
    Memory,
    VariableTable,
    ExecutionContext,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
)

__all__ = [
    # Values
    'Address',
    'Value',
    'bit_val',
    'is_address',
    'describe',

    # Context
    'VariableKind',
    'VariableSlot',
    'Memory',
    'VariableTable',
    'ExecutionContext',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'execute',
    'compile_and_run',
]
