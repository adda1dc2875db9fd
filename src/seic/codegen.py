"""
MIPS Code Generator
===================

Generates assembly for the stack-augmented MIPS-like target from a parsed
Program.

Code Generation Strategy
------------------------
Every value-producing node leaves its result pushed on the operand stack;
every consumer pops into $t0 (and $t1 for the left operand of a binary
operator) before combining. Each node's fragment is therefore
self-contained and composes with any other fragment.

Variables live in word slots addressed from the frame pointer $t6.

Calling Convention
------------------
The caller pushes the arguments left to right and executes ``jal``. The
callee saves the return address, the caller's frame pointer and the stack
pointer at entry, then opens its own frame:

    +----------------+ <- $sp during the body
    | slot N-1       |
    | ...            |
    | slot 0         |
    +----------------+ <- $t6 (callee frame pointer)
    | saved $sp      |  -4($t6)
    | saved $t6      |  -8($t6)
    | saved $ra      |  -12($t6)
    +----------------+ <- $sp at entry
    | arg N-1        |
    | ...            |
    | arg 0          |
    +----------------+

On return the callee pops the value left by the last line of its body,
restores the saved registers, drops its arguments and pushes that value.
A call is therefore an expression leaving exactly one value. A user call
written as a statement has its result dropped by the enclosing block.

Labels
------
Control-flow labels take a suffix from a counter owned by the generator,
so two generators never disagree and sibling blocks never collide.

Usage
-----
>>> from seic.parser import parse_source
>>> from seic.codegen import CodeGenerator
>>> program = parse_source("x sei 1+2;print(x)")
>>> asm = CodeGenerator().generate(program)
"""

from seic import mips
from seic.ast import (
    ASTVisitor,
    BinaryOp,
    BlockKind,
    BuiltinFunction,
    Callee,
    CodeBlock,
    FunctionCall,
    FunctionDecl,
    IfBlock,
    Node,
    NumberLiteral,
    Program,
    VarDecl,
    VariableRef,
    WhileBlock,
)
from seic.errors import RuleContractError

# Words saved by a function prologue: $ra, caller $t6, entry $sp
SAVED_WORDS = 3


class CodeGenerator(ASTVisitor):
    """
    Generates assembly from a seic Program.

    Attributes:
        stack_size: Words reserved for the operand stack by the preamble
        emit_comments: Interleave '#' comments describing each construct
    """

    def __init__(self, stack_size: int = 1000, emit_comments: bool = True):
        self.stack_size = stack_size
        self.emit_comments = emit_comments

        self._output: list[str] = []
        self._label_counter: int = 0

    def generate(self, program: Program) -> str:
        """
        Generate the complete assembly for a program.

        Args:
            program: Root block and root frame from the parser

        Returns:
            Stack initialisation, root slot reservation, then the body
        """
        self._output = []
        self._label_counter = 0

        self._emit_comment("stack")
        self._emit_instructions(mips.stack_init(self.stack_size))
        self._emit_comment(f"frame: {program.frame.slot_count} slot(s)")
        self._emit_instructions(mips.reserve_slots(program.frame.slot_count))
        self.visit(program.block)

        return "\n".join(self._output) + "\n"

    def generate_fragment(self, node: Node) -> str:
        """Generate the fragment of a single node, keeping the label counter."""
        saved = self._output
        self._output = []
        try:
            self.visit(node)
            return "\n".join(self._output) + "\n"
        finally:
            self._output = saved

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_comment(self, comment: str) -> None:
        if self.emit_comments:
            self._emit(f"# {comment}")

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instructions(self, instructions: list[str]) -> None:
        for instruction in instructions:
            self._emit(f"        {instruction}")

    def _new_id(self) -> int:
        """Return a fresh label suffix."""
        self._label_counter += 1
        return self._label_counter

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit_instructions(mips.push_value(node.value))

    def visit_VariableRef(self, node: VariableRef):
        if node.slot is None:
            raise RuleContractError(f"variable '{node.name}' reached code generation without a slot")
        self._emit_instructions(mips.load_var(node.slot))

    def visit_BinaryOp(self, node: BinaryOp):
        self.visit(node.left)
        self.visit(node.right)
        self._emit_comment(f"operator {node.operator.symbol}")
        self._emit_instructions(mips.pop_two())
        self._emit_instructions(node.operator.instructions.splitlines())
        self._emit_instructions(mips.push_t0())

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_IfBlock(self, node: IfBlock):
        false_label = f"if_false{self._new_id()}"

        self._emit_comment("if condition")
        self.visit(node.condition)
        self._emit_instructions(mips.pop())
        self._emit_instructions([f"beqz $t0, {false_label}"])
        self._emit_comment("if body")
        self.visit(node.body)
        self._emit_label(false_label)

    def visit_WhileBlock(self, node: WhileBlock):
        label_id = self._new_id()
        start_label = f"while_start{label_id}"
        end_label = f"while_end{label_id}"

        self._emit_label(start_label)
        self._emit_comment("while condition")
        self.visit(node.condition)
        self._emit_instructions(mips.pop())
        self._emit_instructions([f"beqz $t0, {end_label}"])
        self.visit(node.body)
        self._emit_instructions([f"j {start_label}"])
        self._emit_label(end_label)

    def visit_VarDecl(self, node: VarDecl):
        self.visit(node.value)
        self._emit_comment(f"{node.name} -> slot {node.slot}")
        self._emit_instructions(mips.save_var(node.slot))

    def visit_FunctionDecl(self, node: FunctionDecl):
        """
        Emit a function body guarded by a jump, so declaring a function in
        the middle of the program does not execute it.
        """
        end_label = f"{node.name}_end"
        saved = mips.offset(SAVED_WORDS)
        arg_count = len(node.param_slots)

        self._emit_instructions([f"j {end_label}"])
        self._emit_comment(f"function {node.name}({', '.join(node.param_names)})")
        self._emit_label(node.name)

        # Prologue
        self._emit_instructions([
            "sw $ra, 0($sp)",
            f"sw {mips.FRAME_POINTER}, 4($sp)",
            "sw $sp, 8($sp)",
            f"addi $sp, $sp, {saved}",
        ])
        self._emit_instructions(mips.reserve_slots(node.frame.slot_count))

        # Argument k sits below the saved words, last argument nearest
        for index, slot in enumerate(node.param_slots):
            arg_offset = -saved - mips.offset(arg_count - index)
            self._emit_comment(f"parameter {node.param_names[index]} -> slot {slot}")
            self._emit_instructions([
                f"lw $t0, {arg_offset}({mips.FRAME_POINTER})",
                f"sw $t0, {mips.offset(slot)}({mips.FRAME_POINTER})",
            ])

        self._visit_lines(node.body.lines, keep_last=True)

        # Epilogue: the body's last value is the result
        self._emit_comment(f"return from {node.name}")
        self._emit_instructions(mips.pop())
        self._emit_instructions([
            f"lw $ra, -{saved}({mips.FRAME_POINTER})",
            f"lw $sp, -{mips.offset(1)}({mips.FRAME_POINTER})",
            f"lw {mips.FRAME_POINTER}, -{mips.offset(2)}({mips.FRAME_POINTER})",
        ])
        if arg_count:
            self._emit_instructions([f"addi $sp, $sp, -{mips.offset(arg_count)}"])
        self._emit_instructions(mips.push_t0())
        self._emit_instructions(["jr $ra"])
        self._emit_label(end_label)

    def visit_FunctionCall(self, node: FunctionCall):
        self._emit_comment(f"call {node.callee.name}")
        for arg in node.args:
            self.visit(arg)
        self._emit_instructions(self._call_instructions(node.callee))

    def _call_instructions(self, callee: Callee) -> list[str]:
        if isinstance(callee, BuiltinFunction):
            return mips.syscall(callee.syscall)
        return [f"jal {callee.name}"]

    def visit_CodeBlock(self, node: CodeBlock):
        if node.kind is BlockKind.CURLY:
            self._visit_lines(node.lines, keep_last=False)
        else:
            for line in node.lines:
                self.visit(line)

    def _visit_lines(self, lines: tuple[Node, ...], keep_last: bool) -> None:
        """
        Visit statement lines, dropping the result of user calls made as
        statements. With ``keep_last`` the final line keeps its value.
        """
        for index, line in enumerate(lines):
            self.visit(line)
            if keep_last and index == len(lines) - 1:
                continue
            if isinstance(line, FunctionCall) and not isinstance(line.callee, BuiltinFunction):
                self._emit_comment(f"drop result of {line.callee.name}")
                self._emit_instructions([f"addi $sp, $sp, -{mips.WORD_SIZE}"])


def generate(program: Program, stack_size: int = 1000, emit_comments: bool = True) -> str:
    """Generate assembly for ``program`` with a fresh generator."""
    return CodeGenerator(stack_size, emit_comments).generate(program)
