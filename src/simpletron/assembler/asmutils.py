from lark import Lark, Transformer

from simpletron.core.constants import *
from simpletron.core.numeric import word, split, fmt

asmgrammar = r"""
%ignore /[\t \f\r]+/  // Whitespace
%ignore COMMENT
COMMENT: /;[^\n]*/
MNEMONIC: /[a-z]+/i
ADDRESS: /\d+/
WORD: /[+-]\d+/

start: [address] (instruction | literal)
address: ADDRESS ":"
instruction: MNEMONIC [ADDRESS]
literal: WORD
"""
asml = Lark(asmgrammar, parser="lalr")

class AsmTransformer(Transformer):
    def start(self, node):
        return node[0], node[1]
    def address(self, node):
        return int(node[0])
    def instruction(self, node):
        operand = 0 if node[1] is None else int(node[1])
        return node[0].value.upper(), operand
    def literal(self, node):
        return int(node[0])

asmt = AsmTransformer()
def asm(text):
    """Assembles one instruction or signed literal per line.

        00: LOAD 07   ; comment
        READ 10
        +0005

    An optional NN: prefix sets the address of the line, later lines
    continue from there. Returns a full memory image.
    """
    memory = [0] * MEMORY_SIZE
    counter = 0
    for lineno, line in enumerate(text.split("\n"), 1):
        if not line.split(";")[0].strip():
            continue
        address, cell = asmt.transform(asml.parse(line))
        if address is not None:
            counter = address
        if isinstance(cell, tuple):
            name, operand = cell
            if name not in Op.__members__:
                raise ValueError("Line %i: unknown mnemonic %s" % (lineno, name))
            if operand >= MEMORY_SIZE:
                raise ValueError("Line %i: operand %i out of range" % (lineno, operand))
            cell = word(Op[name], operand)
        if counter >= MEMORY_SIZE:
            raise ValueError("Line %i: address %i out of range" % (lineno, counter))
        memory[counter] = cell
        counter += 1
    return memory

def disasm(memory, start=0, stop=None):
    """Listing lines, one per cell"""
    if stop is None:
        stop = len(memory)
    lines = []
    for address in range(start, stop):
        cell = memory[address]
        opcode, operand = split(cell)
        if cell >= 0 and opcode in INSTR:
            lines.append("  %02i: %s  %-10s %02i" % (address, fmt(cell), INSTR[opcode], operand))
        else:
            lines.append("  %02i: %s" % (address, fmt(cell)))
    return lines
