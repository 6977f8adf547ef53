"""Init-code interpreter behind the host's deploy primitive.

Runs the small instruction subset the compositor emits (pushes, dups,
``CODECOPY``, ``SSTORE``, ``RETURN``) and yields the permanent code image
plus any slots written during deployment. Anything else aborts the
deployment; an aborted deployment leaves no state behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cardclone.domain.compositor import (
    OP_CODECOPY,
    OP_DUP1,
    OP_PUSH1,
    OP_RETURN,
    OP_RETURNDATASIZE,
    OP_SSTORE,
    OP_STOP,
)

OP_PUSH32 = 0x7F
OP_DUP16 = 0x8F

DEFAULT_MAX_STEPS = 1024
DEFAULT_MAX_MEMORY = 16 * 1024 * 1024  # 16 MiB
MAX_SLOT = 2**63 - 1


class ExecutionError(Exception):
    """Init code aborted (bad opcode, underflow, or resource exhaustion)."""


@dataclass
class InitResult:
    """Outcome of running init code."""

    code: bytes
    storage: dict[int, bytes] = field(default_factory=dict)


def run_init_code(
    init_code: bytes,
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
    max_memory: int = DEFAULT_MAX_MEMORY,
) -> InitResult:
    """Execute *init_code* and return the code image it returns.

    Raises:
        ExecutionError: On an unsupported opcode, stack underflow, truncated
            push, or when *max_steps* / *max_memory* is exceeded.
    """
    stack: list[int] = []
    memory = bytearray()
    storage: dict[int, bytes] = {}
    pc = 0
    steps = 0

    def pop() -> int:
        if not stack:
            raise ExecutionError(f"Stack underflow at pc={pc - 1}")
        return stack.pop()

    while pc < len(init_code):
        steps += 1
        if steps > max_steps:
            raise ExecutionError(f"Step limit of {max_steps} exceeded")

        op = init_code[pc]
        pc += 1

        if op == OP_STOP:
            break
        if op == OP_RETURNDATASIZE:
            stack.append(0)
        elif OP_PUSH1 <= op <= OP_PUSH32:
            width = op - OP_PUSH1 + 1
            if pc + width > len(init_code):
                raise ExecutionError(f"Truncated PUSH{width} at pc={pc - 1}")
            stack.append(int.from_bytes(init_code[pc : pc + width], "big"))
            pc += width
        elif OP_DUP1 <= op <= OP_DUP16:
            depth = op - OP_DUP1 + 1
            if len(stack) < depth:
                raise ExecutionError(f"Stack underflow on DUP{depth} at pc={pc - 1}")
            stack.append(stack[-depth])
        elif op == OP_CODECOPY:
            dest, offset, size = pop(), pop(), pop()
            if dest + size > max_memory:
                raise ExecutionError(f"Memory limit of {max_memory} bytes exceeded")
            chunk = init_code[offset : offset + size].ljust(size, b"\x00")
            if len(memory) < dest + size:
                memory.extend(bytes(dest + size - len(memory)))
            memory[dest : dest + size] = chunk
        elif op == OP_SSTORE:
            slot, value = pop(), pop()
            if slot > MAX_SLOT:
                raise ExecutionError(f"Slot {slot:#x} out of range")
            storage[slot] = value.to_bytes(32, "big")
        elif op == OP_RETURN:
            offset, size = pop(), pop()
            if offset + size > max_memory:
                raise ExecutionError(f"Memory limit of {max_memory} bytes exceeded")
            return InitResult(
                code=bytes(memory[offset : offset + size]).ljust(size, b"\x00"),
                storage=storage,
            )
        else:
            raise ExecutionError(f"Unsupported opcode 0x{op:02x} at pc={pc - 1}")

    return InitResult(code=b"", storage=storage)
