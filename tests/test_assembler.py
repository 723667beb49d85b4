import pytest

from simpletron.core.constants import MEMORY_SIZE
from simpletron.assembler.asmutils import asm, disasm
from simpletron.assembler.assembler import Binary, load, pack, unpack
from simpletron.compiler.compiler import compile


def test_asm_addresses_and_comments():
    memory = asm("""
        ; read a value
        READ 07     ; into 07
        write 07
        halt
        10: -0042
        +0001
    """)
    assert len(memory) == MEMORY_SIZE
    assert memory[:3] == [1007, 1107, 4300]
    assert memory[10:12] == [-42, 1]

def test_asm_errors():
    with pytest.raises(ValueError, match="unknown mnemonic"):
        asm("JUMP 10")
    with pytest.raises(ValueError, match="out of range"):
        asm("LOAD 100")
    with pytest.raises(ValueError, match="out of range"):
        asm("99: HALT\nHALT")

def test_disasm():
    lines = disasm([1007, 4300, 5, -1])
    assert lines[0].split() == ["00:", "+1007", "READ", "07"]
    assert lines[1].split() == ["01:", "+4300", "HALT", "00"]
    assert lines[2] == "  02: +0005"
    assert lines[3] == "  03: -0001"
    assert disasm([1007, 4300, 5], 1, 2) == [lines[1]]

def test_image_file(tmp_path):
    binary = compile("10 let x = 5\n20 print x\n30 end")
    path = tmp_path / "prog.sml"
    binary.write(str(path))

    lines = path.read_text().split("\n")
    assert lines[0] == "+2098"
    assert len(lines) == MEMORY_SIZE + 1
    assert lines[-1] == ""
    assert load(str(path)).data == binary.data

def test_unpack():
    memory = unpack("+1007 +4300\n\n  -0001\n")
    assert len(memory) == MEMORY_SIZE
    assert memory[:4] == [1007, 4300, -1, 0]
    assert len(unpack(" ".join(["+0001"] * 120))) == MEMORY_SIZE
    with pytest.raises(ValueError, match="Invalid memory word"):
        unpack("+1007 abc")

def test_pack():
    assert pack([7, -1]) == "+0007\n-0001\n"
    assert len(Binary([0] * MEMORY_SIZE)) == MEMORY_SIZE
