import sys
import time
import logging
import argparse

from simpletron.core.constants import MAX_CYCLES, CYCLES
from simpletron.core.vm import VM
from simpletron.assembler.assembler import load

logger = logging.getLogger(__name__)


def entry_point(image, gas=MAX_CYCLES, dump=False, stdin=None, stdout=None):
    """Runs a memory image, or the image file at path image. Returns the VM"""
    if isinstance(image, str):
        image = load(image).data

    vm = VM(gas, stdin=stdin, stdout=stdout)
    vm.load(image)

    t = time.time()
    vm.run()
    logger.info("Ran %i cycles in %.3fs", vm.head[CYCLES], time.time() - t)

    if vm.error:
        print("Runtime Error: %s" % vm.error, file=sys.stderr)
    if dump:
        print(vm.dump_registers(), file=vm.stdout)
        print(vm.dump_memory(), file=vm.stdout)
    return vm

if __name__ == "__main__":
    parser = argparse.ArgumentParser("simpletron-vm", description="Executes a Simpletron memory image")
    parser.add_argument("filename", type=str)
    parser.add_argument("--gas", type=int, default=MAX_CYCLES)
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--dump", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    vm = entry_point(args.filename, args.gas, args.dump)
    sys.exit(0 if vm.error == "" else 1)
