from collections import namedtuple

from simpletron.core.constants import *
from simpletron.core.numeric import word, patch
from simpletron.compiler.errors import CompileError


# Symbol kinds
LINE, VARIABLE, CONSTANT, ARRAY, STRING = range(5)
KINDS = ["LINE", "VAR", "CONST", "ARRAY", "STRING"]

# Branch at address waiting for the instruction address of a line
ForwardRef = namedtuple("ForwardRef", ["address", "line"])


class Symbol:
    def __init__(self, kind, key, location, size=1):
        self.kind = kind
        self.key = key
        self.location = location
        self.size = size

    def __repr__(self):
        return "Symbol(%s, %r, %i, %i)" % (KINDS[self.kind], self.key, self.location, self.size)

    def describe(self):
        if self.kind == VARIABLE:
            key = "'%s'" % chr(ord("a") + self.key)
        elif self.kind == STRING:
            key = '"%s"' % self.key
        else:
            key = "%3i" % self.key
        return "%-6s %s -> loc %02i" % (KINDS[self.kind], key, self.location)


class LoopFrame:
    """Compile time state of one open for loop"""

    def __init__(self, variable, var_addr, end_addr, step_addr, start, negative):
        self.variable = variable
        self.var_addr = var_addr
        self.end_addr = end_addr
        self.step_addr = step_addr
        self.start = start
        self.negative = negative


class SymbolTable:
    """Symbols and the memory they are allocated in.

    Instructions grow upward from 0 (instruction_counter is the next free
    code cell), data grows downward from MEMORY_SIZE-1 (data_counter is the
    next free data cell). The two cursors must never meet.
    """

    def __init__(self):
        self.memory = [0] * MEMORY_SIZE
        self.symbols = []
        self.instruction_counter = 0
        self.data_counter = MEMORY_SIZE - 1
        self.nstrings = 0

    def find(self, kind, key):
        for symbol in self.symbols:
            if symbol.kind == kind and symbol.key == key:
                return symbol
        return None

    def add(self, kind, key, location, size=1):
        if len(self.symbols) >= MAX_SYMBOLS:
            raise CompileError("Symbol table overflow")
        symbol = Symbol(kind, key, location, size)
        self.symbols.append(symbol)
        return symbol

    def emit(self, opcode, operand=0):
        """Writes an instruction to the next code cell, returns its address"""
        if self.instruction_counter >= self.data_counter:
            raise CompileError("Memory overflow: code and data collision")
        address = self.instruction_counter
        self.memory[address] = word(opcode, operand)
        self.instruction_counter += 1
        return address

    def alloc(self):
        """Takes the next data cell"""
        if self.data_counter <= self.instruction_counter:
            raise CompileError("Memory overflow: code and data collision")
        address = self.data_counter
        self.data_counter -= 1
        return address

    def patch(self, address, operand):
        self.memory[address] = patch(self.memory[address], operand)

    def intern_variable(self, index):
        symbol = self.find(VARIABLE, index)
        if symbol is not None:
            return symbol.location
        return self.add(VARIABLE, index, self.alloc()).location

    def intern_constant(self, value):
        symbol = self.find(CONSTANT, value)
        if symbol is not None:
            return symbol.location
        location = self.add(CONSTANT, value, self.alloc()).location
        self.memory[location] = value
        return location

    def declare_array(self, index, size):
        """Allocates size cells, element i lives at base-i"""
        symbol = self.find(ARRAY, index)
        if symbol is not None:
            return symbol.location
        base = self.data_counter
        for i in range(size):
            self.alloc()
        return self.add(ARRAY, index, base, size).location

    def element(self, index, subscript):
        """Address of an array element, declaring the array on first use"""
        symbol = self.find(ARRAY, index)
        if symbol is None:
            self.declare_array(index, max(subscript + 1, DEFAULT_ARRAY_SIZE))
            symbol = self.find(ARRAY, index)
        if not 0 <= subscript < symbol.size:
            raise CompileError("Array index %i out of bounds (0-%i)" % (subscript, symbol.size - 1))
        return symbol.location - subscript

    def declare_line(self, number, address=None):
        if address is None:
            address = self.instruction_counter
        return self.add(LINE, number, address)

    def line_address(self, number):
        symbol = self.find(LINE, number)
        return None if symbol is None else symbol.location

    def intern_string(self, text):
        """Length cell at the returned address, characters below it"""
        symbol = self.find(STRING, text)
        if symbol is not None:
            return symbol.location
        if self.nstrings >= MAX_STRINGS:
            raise CompileError("Too many string constants")
        if len(text) >= MAX_STRING_LEN:
            raise CompileError("String constant too long (%i characters, max %i)" % (len(text), MAX_STRING_LEN - 1))
        location = self.alloc()
        self.memory[location] = len(text)
        for c in text:
            self.memory[self.alloc()] = ord(c)
        self.nstrings += 1
        return self.add(STRING, text, location, len(text) + 1).location

    def dump(self):
        lines = ["=== Symbol Table ==="]
        for symbol in self.symbols:
            lines.append("  " + symbol.describe())
        return "\n".join(lines)
