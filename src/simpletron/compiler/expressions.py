from lark import Tree
from lark.visitors import Interpreter

from simpletron.core.constants import Op
from simpletron.compiler.errors import CompileError
from simpletron.compiler.symbols import SymbolTable


def literal(token):
    """Integer value of a NUMBER token, fractions are truncated"""
    return int(token.value.split(".")[0])

def varindex(name):
    """Variables are identified by their first letter only"""
    c = name[0].lower()
    if not "a" <= c <= "z":
        raise CompileError("Invalid variable: %s" % name)
    return ord(c) - ord("a")

def subscript(node):
    if not isinstance(node, Tree) or node.data != "number" or "." in node.children[0]:
        raise CompileError("Array index must be a constant (SML limitation)")
    return literal(node.children[0])


class ExpressionCompiler(Interpreter):
    """Emits code leaving the value of an expression in the accumulator.

    Subtrees are visited top-down, left operand first, so temporaries and
    constants are allocated in source order. Every binary operator spills
    both operands to fresh temporaries, temporaries are never reused.
    """

    def __init__(self, table=None):
        self.table = table if table is not None else SymbolTable()

    def emit(self, opcode, operand=0):
        return self.table.emit(opcode, operand)

    def spill(self):
        """Stores the accumulator in a new temporary"""
        temp = self.table.alloc()
        self.emit(Op.STORE, temp)
        return temp

    def address(self, name, index=None):
        """Data address of a scalar, or of an array element if index is given"""
        var = varindex(name)
        if index is None:
            return self.table.intern_variable(var)
        return self.table.element(var, subscript(index))

    def number(self, tree):
        self.emit(Op.LOAD, self.table.intern_constant(literal(tree.children[0])))

    def var(self, tree):
        self.emit(Op.LOAD, self.address(tree.children[0]))

    def element(self, tree):
        name, index = tree.children
        self.emit(Op.LOAD, self.address(name, index))

    def binary(self, tree, opcode):
        left, right = tree.children
        self.visit(left)
        temp = self.spill()
        self.visit(right)
        temp2 = self.spill()
        self.emit(Op.LOAD, temp)
        self.emit(opcode, temp2)

    def add(self, tree):
        self.binary(tree, Op.ADD)

    def sub(self, tree):
        self.binary(tree, Op.SUB)

    def mul(self, tree):
        self.binary(tree, Op.MUL)

    def div(self, tree):
        self.binary(tree, Op.DIV)

    def mod(self, tree):
        self.binary(tree, Op.MOD)

    def neg(self, tree):
        # 0 - x
        self.visit(tree.children[0])
        zero = self.table.intern_constant(0)
        temp = self.spill()
        self.emit(Op.LOAD, zero)
        self.emit(Op.SUB, temp)

    def pos(self, tree):
        self.visit(tree.children[0])

    def pow(self, tree):
        """Multiplication loop, counts the exponent down to zero.

        A zero or negative exponent skips the loop, the result is 1.
        """
        base, exponent = tree.children
        self.visit(base)
        base_loc = self.spill()
        self.visit(exponent)
        exp_loc = self.spill()
        result = self.table.alloc()
        one = self.table.intern_constant(1)
        self.emit(Op.LOAD, one)
        self.emit(Op.STORE, result)

        start = self.table.instruction_counter
        self.emit(Op.LOAD, exp_loc)
        exit_zero = self.emit(Op.BRANCHZERO)
        exit_neg = self.emit(Op.BRANCHNEG)
        self.emit(Op.LOAD, result)
        self.emit(Op.MUL, base_loc)
        self.emit(Op.STORE, result)
        self.emit(Op.LOAD, exp_loc)
        self.emit(Op.SUB, one)
        self.emit(Op.STORE, exp_loc)
        self.emit(Op.BRANCH, start)

        end = self.table.instruction_counter
        self.table.patch(exit_zero, end)
        self.table.patch(exit_neg, end)
        self.emit(Op.LOAD, result)
