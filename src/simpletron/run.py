import sys
import logging
from argparse import ArgumentParser

from simpletron.core.constants import MAX_CYCLES, CYCLES
from simpletron.compiler.compiler import Compiler
from simpletron.compiler.errors import CompileError
from simpletron.shell import entry_point

parser = ArgumentParser(
    prog="simpletron",
    description="Simple compiler and Simpletron machine language virtual machine"
)

mode = parser.add_mutually_exclusive_group()
mode.add_argument("-c", "--compile", dest="mode", action="store_const", const="compile", help="compile to an .sml image")
mode.add_argument("-r", "--run", dest="mode", action="store_const", const="run", help="compile and run (default)")
mode.add_argument("-x", "--execute", dest="mode", action="store_const", const="execute", help="run an .sml image")
parser.add_argument("filename")
parser.add_argument("--out", default=None, help="image path for --compile, FILE.sml by default")
parser.add_argument("--gas", type=int, default=MAX_CYCLES, help="cycle ceiling")
parser.add_argument("--debug", default=False, action="store_true")
parser.add_argument("--dump", default=False, action="store_true", help="print registers and memory after the run")


def build(path):
    """Compiles the source file at path, returns (compiler, binary) or None"""
    with open(path, "r") as f:
        source = f.read()
    compiler = Compiler()
    try:
        binary = compiler.compile(source)
    except CompileError as e:
        print("Compile Error: %s" % e, file=sys.stderr)
        return None
    return compiler, binary

def main(argv=None):
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        if args.mode == "execute":
            vm = entry_point(args.filename, args.gas, args.dump)
            return 0 if vm.error == "" else 1

        built = build(args.filename)
        if built is None:
            return 1
        compiler, binary = built

        if args.mode == "compile":
            print("Compilation successful!")
            print(compiler.dump_symbols())
            print(compiler.dump())
            out = args.out if args.out is not None else args.filename + ".sml"
            binary.write(out)
            print("SML program written to: %s" % out)
            return 0

        vm = entry_point(binary.data, args.gas, args.dump)
        print("\n=== Program finished (cycles: %i) ===" % vm.head[CYCLES])
        return 0 if vm.error == "" else 1
    except (OSError, ValueError) as e:
        print("Error: %s" % e, file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
