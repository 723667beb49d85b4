from simpletron.core.constants import WORDBASE


def word(opcode, operand=0):
    """Encodes an instruction word"""
    return int(opcode) * WORDBASE + operand

def split(instruction):
    """Decodes an instruction word into (opcode, operand)"""
    return instruction // WORDBASE, instruction % WORDBASE

def patch(instruction, operand):
    """Replaces the operand, keeps the opcode"""
    return (instruction // WORDBASE) * WORDBASE + operand

def tdiv(a, b):
    """Integer division truncating toward zero"""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def tmod(a, b):
    """Remainder with the sign of the dividend"""
    return a - b * tdiv(a, b)

def fmt(value):
    """Signed four digit cell format, +0042 / -0001"""
    return "%+05d" % value
