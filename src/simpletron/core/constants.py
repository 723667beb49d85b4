from enum import IntEnum, unique

# Number of cells shared by instructions and data
MEMORY_SIZE = 100
# Instruction word is opcode*WORDBASE + operand
WORDBASE = 100

# Default cycle ceiling ("gas") of a single run
MAX_CYCLES = 100000

# Compiler capacities
MAX_SYMBOLS = 100
MAX_FLAGS = 100
MAX_FOR_DEPTH = 10
MAX_STRINGS = 50
MAX_STRING_LEN = 64
# Arrays are sized max(index+1, DEFAULT_ARRAY_SIZE) on first access
DEFAULT_ARRAY_SIZE = 10

# Register fields
ACC, IP, IR, OPCODE, OPERAND, STATUS, CYCLES = range(7)

# VM status
NORMAL, VOLHALT, OOC, OOB, DBZ, UOC, IIN, OOG, BIN = range(9)
#STATI = ["NORMAL", "HALTED", "OUTOFCODE", "OUTOFBOUNDS", "DIVBYZERO", "UNKNOWNCODE", "INVALIDINSTRUCTION", "OUTOFGAS", "BADINPUT"]
STATI = ["NOR", "HLT", "OOC", "OOB", "DBZ", "UOC", "IIN", "OOG", "BIN"]


@unique
class Op(IntEnum):
    # I/O
    READ = 10
    WRITE = 11
    NEWLINE = 12
    WRITES = 13
    # Data transfer
    LOAD = 20
    STORE = 21
    # Arithmetic
    ADD = 30
    SUB = 31
    DIV = 32
    MUL = 33
    MOD = 34
    # Control flow
    BRANCH = 40
    BRANCHNEG = 41
    BRANCHZERO = 42
    HALT = 43


# Instruction names as usable in the assembler
INSTR = {op.value: op.name for op in Op}
