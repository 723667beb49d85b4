import sys
import logging

from simpletron.core.constants import *
from simpletron.core.numeric import split, tdiv, tmod, fmt

logger = logging.getLogger(__name__)


class VM:
    """Simpletron accumulator machine.

    Instructions and data share one MEMORY_SIZE cell memory. Every cycle
    fetches memory[IP] into IR, decodes opcode = IR/100 and operand = IR%100
    and executes it. Faults never raise: they stop the machine, set a status
    code and the error message.
    """

    def __init__(self, gas=MAX_CYCLES, stdin=None, stdout=None):
        self.gas = gas
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.memory = [0] * MEMORY_SIZE
        self.head = [0] * 7
        # Halted until a program is loaded
        self.head[STATUS] = VOLHALT
        self.error = ""
        self.pending = []

    def load(self, memory):
        """Copies a memory image and resets the registers"""
        if len(memory) > MEMORY_SIZE:
            raise ValueError("Image has %i cells, memory has %i" % (len(memory), MEMORY_SIZE))
        self.memory = list(memory) + [0] * (MEMORY_SIZE - len(memory))
        self.head = [0] * 7
        self.head[STATUS] = NORMAL
        self.error = ""
        self.pending = []

    @property
    def running(self):
        return self.head[STATUS] == NORMAL

    @property
    def accumulator(self):
        return self.head[ACC]

    @property
    def status(self):
        return STATI[self.head[STATUS]]

    def fail(self, status, msg):
        """Halts with an error status"""
        self.head[STATUS] = status
        self.error = msg
        logger.info("VM halted (%s): %s", STATI[status], msg)
        return False

    def next(self, jump=None):
        """Sets the instruction pointer"""
        if jump is None:
            self.head[IP] += 1
        else:
            self.head[IP] = jump

    def validaddr(self, addr):
        return 0 <= addr < MEMORY_SIZE

    def readint(self):
        """Next whitespace separated integer of the input stream"""
        while not self.pending:
            line = self.stdin.readline()
            if not line:
                return None
            self.pending = line.split()
        try:
            return int(self.pending.pop(0))
        except ValueError:
            return None

    def write(self, text):
        self.stdout.write(text)
        self.stdout.flush()

    def step(self):
        """Executes one instruction. Returns False once the machine stopped"""
        if not self.running:
            return False

        head = self.head
        memory = self.memory
        ip = head[IP]

        # Check if the instruction pointer is within memory
        if not self.validaddr(ip):
            return self.fail(OOC, "Invalid instruction counter: %i" % ip)

        instr = head[IR] = memory[ip]
        if instr < 0:
            return self.fail(IIN, "Invalid instruction %s at PC=%i" % (fmt(instr), ip))

        opcode, operand = split(instr)
        head[OPCODE] = opcode
        head[OPERAND] = operand

        if not self.validaddr(operand):
            return self.fail(OOB, "Invalid operand: %i at PC=%i" % (operand, ip))

        logger.debug("IP:%02i IR:%s %-10s ACC:%s", ip, fmt(instr), INSTR.get(opcode, "???"), fmt(head[ACC]))

        if opcode == Op.READ:
            self.write("? ")
            value = self.readint()
            if value is None:
                return self.fail(BIN, "Invalid input")
            memory[operand] = value
            self.next()
        elif opcode == Op.WRITE:
            self.write(str(memory[operand]))
            self.next()
        elif opcode == Op.NEWLINE:
            self.write("\n")
            self.next()
        elif opcode == Op.WRITES:
            # Length first, characters at descending addresses
            length = memory[operand]
            if operand - length < 0:
                return self.fail(OOB, "String at %i overruns memory at PC=%i" % (operand, ip))
            self.write("".join(chr(c) for c in memory[operand - length:operand][::-1] if 0 <= c < 256))
            self.next()
        elif opcode == Op.LOAD:
            head[ACC] = memory[operand]
            self.next()
        elif opcode == Op.STORE:
            memory[operand] = head[ACC]
            self.next()
        elif opcode == Op.ADD:
            head[ACC] += memory[operand]
            self.next()
        elif opcode == Op.SUB:
            head[ACC] -= memory[operand]
            self.next()
        elif opcode == Op.DIV:
            if memory[operand] == 0:
                return self.fail(DBZ, "Division by zero at PC=%i" % ip)
            head[ACC] = tdiv(head[ACC], memory[operand])
            self.next()
        elif opcode == Op.MUL:
            head[ACC] *= memory[operand]
            self.next()
        elif opcode == Op.MOD:
            if memory[operand] == 0:
                return self.fail(DBZ, "Modulo by zero at PC=%i" % ip)
            head[ACC] = tmod(head[ACC], memory[operand])
            self.next()
        elif opcode == Op.BRANCH:
            self.next(operand)
        elif opcode == Op.BRANCHNEG:
            self.next(operand if head[ACC] < 0 else None)
        elif opcode == Op.BRANCHZERO:
            self.next(operand if head[ACC] == 0 else None)
        elif opcode == Op.HALT:
            head[STATUS] = VOLHALT
            logger.info("VM halted after %i cycles", head[CYCLES])
            return False
        else:
            return self.fail(UOC, "Unknown opcode %i at PC=%i" % (opcode, ip))

        head[CYCLES] += 1
        if head[CYCLES] >= self.gas:
            return self.fail(OOG, "Exceeded maximum cycles (%i), possible infinite loop" % self.gas)
        return True

    def run(self):
        """Runs until HALT or a fault. Returns True on a normal halt"""
        while self.step():
            pass
        return self.error == ""

    def registers(self):
        head = self.head
        return {
            "accumulator": head[ACC],
            "instruction_counter": head[IP],
            "instruction_register": head[IR],
            "opcode": head[OPCODE],
            "operand": head[OPERAND],
            "cycles": head[CYCLES],
            "status": STATI[head[STATUS]],
        }

    def dump_registers(self):
        head = self.head
        lines = ["=== Registers ==="]
        lines.append("  Accumulator:          %s" % fmt(head[ACC]))
        lines.append("  Instruction Counter:  %02i" % head[IP])
        lines.append("  Instruction Register: %s" % fmt(head[IR]))
        lines.append("  Opcode:               %02i" % head[OPCODE])
        lines.append("  Operand:              %02i" % head[OPERAND])
        lines.append("  Cycle Count:          %i" % head[CYCLES])
        return "\n".join(lines)

    def dump_memory(self):
        lines = ["=== Memory ==="]
        lines.append("   " + "".join("%7i" % col for col in range(10)))
        for row in range(0, MEMORY_SIZE, 10):
            lines.append("%2i " % row + "".join("  " + fmt(cell) for cell in self.memory[row:row + 10]))
        return "\n".join(lines)
