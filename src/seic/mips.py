"""
MIPS Fragment Primitives
========================

Small instruction sequences shared by the code generator. Each function
returns a list of instruction lines without indentation.

Machine Model
-------------
| Register | Usage                                         |
|----------|-----------------------------------------------|
| $t0      | Value just popped / value about to be pushed  |
| $t1      | Left operand of a binary operator             |
| $t6      | Frame pointer, base of the variable slots     |
| $sp      | Operand stack pointer (grows upward)          |
| $ra      | Return address                                |

All addressing is in 4-byte words: slot ``n`` lives at ``4*n($t6)`` and
every push or pop moves ``$sp`` by one word.
"""

WORD_SIZE = 4
FRAME_POINTER = "$t6"


def offset(words: int) -> int:
    """Convert a word count into a byte offset."""
    return words * WORD_SIZE


def push_t0() -> list[str]:
    """Push $t0 onto the operand stack."""
    return [
        "sw $t0, 0($sp)",
        f"addi $sp, $sp, {WORD_SIZE}",
    ]


def push_value(value: str) -> list[str]:
    """Push an immediate value."""
    return [f"addi $t0, $zero, {value}"] + push_t0()


def pop() -> list[str]:
    """Pop the top of the operand stack into $t0."""
    return [
        f"lw $t0, -{WORD_SIZE}($sp)",
        f"addi $sp, $sp, -{WORD_SIZE}",
    ]


def pop_two() -> list[str]:
    """Pop the right operand into $t0 and the left operand into $t1."""
    return [
        f"lw $t0, -{WORD_SIZE}($sp)",
        f"lw $t1, -{2 * WORD_SIZE}($sp)",
        f"addi $sp, $sp, -{2 * WORD_SIZE}",
    ]


def load_var(slot: int) -> list[str]:
    """Push the value stored in ``slot``."""
    return [f"lw $t0, {offset(slot)}({FRAME_POINTER})"] + push_t0()


def save_var(slot: int) -> list[str]:
    """Pop a value and store it into ``slot``."""
    return pop() + [f"sw $t0, {offset(slot)}({FRAME_POINTER})"]


def reserve_slots(count: int) -> list[str]:
    """Point the frame pointer at the stack top and reserve ``count`` slots."""
    return [
        f"add {FRAME_POINTER}, $sp, $zero",
        f"addi $sp, $sp, {offset(count)}",
    ]


def syscall(code: int) -> list[str]:
    """Pop one value and hand it to system call ``code`` in $a0."""
    return pop() + [
        f"addi $v0, $zero, {code}",
        "add $a0, $t0, $zero",
        "syscall",
    ]


def stack_init(size: int) -> list[str]:
    """Make room for ``size`` words of operand stack."""
    return [f"addi $sp, $sp, -{offset(size)}"]
