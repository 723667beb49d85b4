import io

import pytest

from simpletron.compiler.compiler import compile
from simpletron.shell import entry_point


def run(source, stdin="", gas=100000):
    out = io.StringIO()
    vm = entry_point(compile(source).data, gas, stdin=io.StringIO(stdin), stdout=out)
    return vm, out.getvalue()


def test_print_variable():
    vm, out = run("10 let x = 5\n20 print x\n30 end")
    assert out == "5\n"
    assert vm.status == "HLT"

def test_hello():
    vm, out = run('10 print "HELLO", " ", 42\n20 end')
    assert out == "HELLO 42\n"

def test_countdown():
    vm, out = run("10 for i = 5 to 1 step -1\n20 print i\n30 next i\n40 end")
    assert out == "5\n4\n3\n2\n1\n"

def test_for_steps():
    vm, out = run("10 for i = 1 to 5 step 2\n20 print i\n30 next i\n40 end")
    assert out == "1\n3\n5\n"

def test_nested_loops():
    source = """
10 for i = 1 to 2
20 for j = 1 to 3
30 print i * 10 + j
40 next j
50 next i
60 end
"""
    vm, out = run(source)
    assert out.split() == ["11", "12", "13", "21", "22", "23"]

def test_loop_body_runs_at_least_once():
    vm, out = run("10 for i = 5 to 1\n20 print i\n30 next i\n40 end")
    assert out == "5\n"

def test_forward_goto():
    vm, out = run("10 goto 30\n20 print 1\n30 print 2\n40 end")
    assert out == "2\n"

@pytest.mark.parametrize("op,less,equal", [
    ("==", "0", "1"),
    ("!=", "1", "0"),
    ("<", "1", "0"),
    (">", "0", "0"),
    ("<=", "1", "1"),
    (">=", "0", "1"),
])
def test_relations(op, less, equal):
    source = "10 input x\n20 if x %s 5 goto 50\n30 print 0\n40 end\n50 print 1\n60 end" % op
    vm, out = run(source, "3\n")
    assert out == "? %s\n" % less
    vm, out = run(source, "5\n")
    assert out == "? %s\n" % equal

def test_greater_than_taken():
    vm, out = run("10 let x = 7\n20 if x > 5 goto 50\n30 print 0\n40 end\n50 print 1\n60 end")
    assert out == "1\n"

@pytest.mark.parametrize("expr,value", [
    ("2 + 3 * 4", "14"),
    ("(2 + 3) * 4", "20"),
    ("10 - 2 - 3", "5"),
    ("-7 / 2", "-3"),
    ("7 / -2", "-3"),
    ("-7 % 3", "-1"),
    ("+4 - -4", "8"),
    ("2 ^ 10", "1024"),
    ("3 ^ 0", "1"),
    ("5 ^ -1", "1"),
    ("2 ^ 3 ^ 2", "512"),
    ("-2 ^ 2", "4"),
    ("7.9 + 0.5", "7"),
])
def test_expression_values(expr, value):
    vm, out = run("10 print %s\n20 end" % expr)
    assert out == value + "\n"

def test_input_and_sum():
    vm, out = run("10 input a, b\n20 print a + b\n30 end", "3 4\n")
    assert out == "? ? 7\n"

def test_arrays():
    vm, out = run("10 let a(0) = 3\n20 let a(9) = 4\n30 print a(0) * a(9)\n40 end")
    assert out == "12\n"

def test_factorial():
    source = """
10 rem factorial
20 input n
30 let f = 1
40 for i = 1 to n
50 let f = f * i
60 next i
70 print "F=", f
80 end
"""
    vm, out = run(source, "5\n")
    assert out == "? F=120\n"

def test_division_by_zero_at_runtime():
    vm, out = run("10 let x=10\n20 let y=0\n30 let z = x/y\n40 end")
    assert vm.status == "DBZ"
    assert vm.error.startswith("Division by zero")
    assert out == ""

def test_partial_output_before_fault():
    vm, out = run("10 print 1\n20 let x = 1 % 0\n30 print 2\n40 end")
    assert vm.status == "DBZ"
    assert out == "1\n"

def test_infinite_loop_runs_out_of_cycles():
    vm, out = run("10 goto 10", gas=1000)
    assert vm.status == "OOG"
