import pytest

from simpletron.core.constants import *
from simpletron.compiler.errors import CompileError
from simpletron.compiler.symbols import SymbolTable, VARIABLE, CONSTANT, LINE, STRING


def test_cursors_start_at_both_ends():
    table = SymbolTable()
    assert table.instruction_counter == 0
    assert table.data_counter == MEMORY_SIZE - 1
    assert table.emit(Op.LOAD, 99) == 0
    assert table.memory[0] == 2099
    assert table.alloc() == 99
    assert table.instruction_counter == 1
    assert table.data_counter == 98

def test_constants_are_interned_once():
    table = SymbolTable()
    assert table.intern_constant(5) == 99
    assert table.intern_constant(7) == 98
    assert table.intern_constant(5) == 99
    assert table.memory[99] == 5
    assert table.memory[98] == 7
    assert len([s for s in table.symbols if s.kind == CONSTANT]) == 2

def test_variables_share_their_cell():
    table = SymbolTable()
    a = table.intern_variable(0)
    assert table.intern_variable(0) == a
    assert table.intern_variable(25) == a - 1
    assert table.find(VARIABLE, 25).location == a - 1

def test_code_and_data_collision():
    table = SymbolTable()
    for i in range(MEMORY_SIZE - 1):
        table.emit(Op.HALT)
    with pytest.raises(CompileError, match="Memory overflow"):
        table.emit(Op.HALT)
    with pytest.raises(CompileError, match="Memory overflow"):
        table.alloc()

def test_symbol_table_overflow():
    table = SymbolTable()
    for number in range(MAX_SYMBOLS):
        table.declare_line(number)
    with pytest.raises(CompileError, match="Symbol table overflow"):
        table.declare_line(MAX_SYMBOLS)

def test_first_line_definition_wins():
    table = SymbolTable()
    table.declare_line(10, 3)
    table.declare_line(10, 8)
    assert table.line_address(10) == 3
    assert table.line_address(20) is None
    assert len([s for s in table.symbols if s.kind == LINE]) == 2

def test_arrays():
    table = SymbolTable()
    assert table.element(0, 3) == 96
    assert table.data_counter == 89
    assert table.element(0, 9) == 90
    with pytest.raises(CompileError, match=r"Array index 10 out of bounds \(0-9\)"):
        table.element(0, 10)
    # Large first index sizes the array to fit
    assert table.element(1, 15) == 89 - 15
    assert table.data_counter == 89 - 16

def test_string_layout():
    table = SymbolTable()
    location = table.intern_string("HI")
    assert location == 99
    assert table.memory[99] == 2
    assert table.memory[98] == ord("H")
    assert table.memory[97] == ord("I")
    assert table.intern_string("HI") == 99
    assert table.data_counter == 96
    assert table.find(STRING, "HI").size == 3

def test_string_limits():
    table = SymbolTable()
    table.intern_string("x" * (MAX_STRING_LEN - 1))
    with pytest.raises(CompileError, match="String constant too long"):
        table.intern_string("y" * MAX_STRING_LEN)

    table = SymbolTable()
    table.intern_string("")
    for i in range(MAX_STRINGS - 1):
        table.intern_string(chr(ord("A") + i))
    with pytest.raises(CompileError, match="Too many string constants"):
        table.intern_string("overflow")

def test_dump():
    table = SymbolTable()
    table.intern_variable(0)
    table.intern_constant(42)
    table.declare_line(10)
    lines = table.dump().split("\n")
    assert lines[0] == "=== Symbol Table ==="
    assert lines[1] == "  VAR    'a' -> loc 99"
    assert lines[2] == "  CONST   42 -> loc 98"
    assert lines[3] == "  LINE    10 -> loc 00"
