import logging

from simpletron.core.constants import Op, MAX_FLAGS, MAX_FOR_DEPTH
from simpletron.compiler.errors import CompileError
from simpletron.compiler.symbols import ForwardRef, LoopFrame
from simpletron.compiler.expressions import ExpressionCompiler, literal, varindex

logger = logging.getLogger(__name__)

# Branches taken after computing left - right in the accumulator.
# (swap, opcode): swap recomputes right - left before branching
RELATIONS = {
    "==": [(False, Op.BRANCHZERO)],
    "<": [(False, Op.BRANCHNEG)],
    ">": [(True, Op.BRANCHNEG)],
    "<=": [(False, Op.BRANCHNEG), (False, Op.BRANCHZERO)],
    ">=": [(False, Op.BRANCHZERO), (True, Op.BRANCHNEG)],
    "!=": [(False, Op.BRANCHNEG), (True, Op.BRANCHNEG)],
}


class StatementCompiler(ExpressionCompiler):
    """Emits the code of one statement.

    Branches to lines that were not compiled yet are emitted with operand 0
    and recorded in refs, the caller patches them once all lines are known.
    """

    def __init__(self, table=None):
        super().__init__(table)
        self.refs = []
        self.loops = []

    def target(self, tree):
        name, index = tree.children
        return self.address(name, index)

    def reference(self, address, line):
        if len(self.refs) >= MAX_FLAGS:
            raise CompileError("Too many unresolved references")
        self.refs.append(ForwardRef(address, line))
        logger.debug("Forward reference to line %i at %02i", line, address)

    def branch(self, opcode, line):
        address = self.table.line_address(line)
        if address is None:
            self.reference(self.emit(opcode), line)
        else:
            self.emit(opcode, address)

    def rem_stmt(self, tree):
        pass

    def input_stmt(self, tree):
        for target in tree.children:
            self.emit(Op.READ, self.target(target))

    def print_stmt(self, tree):
        for item in tree.children:
            if item is None:
                continue
            if item.data == "string":
                text = item.children[0].value[1:-1]
                self.emit(Op.WRITES, self.table.intern_string(text))
            else:
                self.visit(item)
                self.emit(Op.WRITE, self.spill())
        self.emit(Op.NEWLINE)

    def let_stmt(self, tree):
        target, expr = tree.children
        # The target is allocated before anything in the expression
        location = self.target(target)
        self.visit(expr)
        self.emit(Op.STORE, location)

    def goto_stmt(self, tree):
        self.branch(Op.BRANCH, literal(tree.children[0]))

    def if_stmt(self, tree):
        left, op, right, line = tree.children
        self.visit(left)
        temp_left = self.spill()
        self.visit(right)
        temp_right = self.spill()
        self.emit(Op.LOAD, temp_left)
        self.emit(Op.SUB, temp_right)

        for swap, opcode in RELATIONS[op.children[0].value]:
            if swap:
                self.emit(Op.LOAD, temp_right)
                self.emit(Op.SUB, temp_left)
            self.branch(opcode, literal(line))

    def for_stmt(self, tree):
        name, start, end, step = tree.children
        var = varindex(name)
        var_addr = self.table.intern_variable(var)
        self.visit(start)
        self.emit(Op.STORE, var_addr)
        self.visit(end)
        end_addr = self.spill()

        if step is None:
            step_addr = self.table.intern_constant(1)
            negative = False
        elif step.data == "step_down":
            step_addr = self.table.intern_constant(-literal(step.children[0]))
            negative = True
        else:
            value = literal(step.children[0])
            step_addr = self.table.intern_constant(value)
            negative = value < 0

        if len(self.loops) >= MAX_FOR_DEPTH:
            raise CompileError("For loop nested too deep")
        # The body starts right after the initialisation
        self.loops.append(LoopFrame(var, var_addr, end_addr, step_addr, self.table.instruction_counter, negative))

    def next_stmt(self, tree):
        name = tree.children[0]
        var = varindex(name)
        if not self.loops:
            raise CompileError("next without for")
        frame = self.loops[-1]
        if frame.variable != var:
            raise CompileError("next variable mismatch: expected '%s', got '%s'" % (chr(ord("a") + frame.variable), chr(ord("a") + var)))

        self.emit(Op.LOAD, frame.var_addr)
        self.emit(Op.ADD, frame.step_addr)
        self.emit(Op.STORE, frame.var_addr)
        # Loop again while var has not passed end
        if frame.negative:
            self.emit(Op.LOAD, frame.end_addr)
            self.emit(Op.SUB, frame.var_addr)
        else:
            self.emit(Op.LOAD, frame.var_addr)
            self.emit(Op.SUB, frame.end_addr)
        self.emit(Op.BRANCHNEG, frame.start)
        self.emit(Op.BRANCHZERO, frame.start)
        self.loops.pop()

    def end_stmt(self, tree):
        self.emit(Op.HALT)
