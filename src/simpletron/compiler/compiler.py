import re
import logging

from lark.exceptions import UnexpectedInput, UnexpectedToken

from simpletron.core.constants import *
from simpletron.core.numeric import fmt
from simpletron.compiler.errors import CompileError
from simpletron.compiler.grammar import l
from simpletron.compiler.expressions import literal
from simpletron.compiler.statements import StatementCompiler
from simpletron.compiler.symbols import SymbolTable
from simpletron.assembler.assembler import Binary
from simpletron.assembler.asmutils import disasm

logger = logging.getLogger(__name__)


class Compiler(StatementCompiler):
    """Two pass compiler from Simple source to a Simpletron memory image.

    Pass one compiles the lines in order, declaring each line number at the
    address of its first instruction. Pass two patches the branches to lines
    that were declared after the branch. The first error aborts both passes
    and is kept in error, later calls to memory refuse to return an image.
    """

    def __init__(self):
        super().__init__()
        self.reset()

    def reset(self):
        self.table = SymbolTable()
        self.refs = []
        self.loops = []
        self.error = ""
        self.has_error = False

    def errortext(self, msg, lineno=None, source=None, column=None):
        out = ""
        if lineno is not None:
            out += "Line %i: " % lineno
        out += msg
        if source is not None:
            out += "\n" + source
            if column is not None and column > 0:
                out += "\n" + " " * (column - 1) + "^"
        return out

    def abort(self, msg, lineno=None, source=None, column=None):
        raise CompileError(self.errortext(msg, lineno, source, column), lineno)

    def parse(self, lineno, source):
        try:
            return l.parse(source)
        except UnexpectedToken as e:
            if e.token.type == "$END":
                self.abort("Syntax error: unexpected end of line", lineno, source)
            self.abort("Syntax error: unexpected '%s'" % e.token, lineno, source, e.column)
        except UnexpectedInput as e:
            self.abort("Syntax error: unexpected character", lineno, source, getattr(e, "column", None))

    def compile_line(self, source):
        source = source.strip()
        # Blank lines and lines without a line number are skipped
        if not source or not source[0].isdigit():
            return
        lineno = int(re.match(r"\d+", source).group())
        tree = self.parse(lineno, source)
        number, statement = tree.children
        start = self.table.instruction_counter
        try:
            # Duplicates are recorded, lookups find the first definition
            self.table.declare_line(literal(number))
            if statement is not None:
                self.visit(statement)
        except CompileError as e:
            if e.line is not None:
                raise
            self.abort(str(e), lineno)
        logger.debug("Line %i: %02i-%02i", lineno, start, self.table.instruction_counter)

    def resolve(self):
        for ref in self.refs:
            address = self.table.line_address(ref.line)
            if address is None:
                self.abort("Undefined line number: %i" % ref.line)
            self.table.patch(ref.address, address)
            logger.debug("Patched %02i to line %i at %02i", ref.address, ref.line, address)

    def compile(self, text):
        """Compiles a whole program, returns the memory image as a Binary"""
        self.reset()
        try:
            for source in text.split("\n"):
                self.compile_line(source)
            self.resolve()
        except CompileError as e:
            self.error = str(e)
            self.has_error = True
            logger.info("Compilation failed: %s", self.error)
            raise
        logger.info("Compiled %i instructions, %i data cells", self.table.instruction_counter, MEMORY_SIZE - 1 - self.table.data_counter)
        return Binary(self.memory)

    @property
    def memory(self):
        if self.has_error:
            raise CompileError("No memory image, compilation failed: %s" % self.error)
        return list(self.table.memory)

    @property
    def symbols(self):
        return self.table

    def dump_symbols(self):
        return self.table.dump()

    def dump(self):
        """Listing of the instructions and the data cells in use"""
        table = self.table
        lines = ["=== SML Program ==="]
        lines.append("Instructions (00-%02i):" % (table.instruction_counter - 1))
        lines += disasm(table.memory, 0, table.instruction_counter)
        lines.append("")
        lines.append("Data (%02i-%02i):" % (MEMORY_SIZE - 1, table.data_counter + 1))
        for address in range(MEMORY_SIZE - 1, table.data_counter, -1):
            value = table.memory[address]
            if 32 <= value < 127:
                lines.append("  %02i: %s  '%s'" % (address, fmt(value), chr(value)))
            else:
                lines.append("  %02i: %s" % (address, fmt(value)))
        return "\n".join(lines)


def compile(text):
    return Compiler().compile(text)
