import logging

from simpletron.core.constants import MEMORY_SIZE
from simpletron.core.numeric import fmt

logger = logging.getLogger(__name__)


def pack(memory):
    """One signed four digit word per line"""
    return "".join(fmt(cell) + "\n" for cell in memory)

def unpack(text):
    """Whitespace separated signed words, padded with zeros. Words past the
    end of memory are ignored"""
    memory = []
    for value in text.split()[:MEMORY_SIZE]:
        try:
            memory.append(int(value))
        except ValueError:
            raise ValueError("Invalid memory word %r at cell %i" % (value, len(memory)))
    if len(text.split()) > MEMORY_SIZE:
        logger.warning("Ignoring %i words past the end of memory", len(text.split()) - MEMORY_SIZE)
    return memory + [0] * (MEMORY_SIZE - len(memory))

def load(path):
    with open(path, "r") as f:
        return Binary(unpack(f.read()))


class Binary:
    def __init__(self, data):
        self.data = data

    def __len__(self):
        return len(self.data)

    def write(self, path):
        logger.info("Writing %i words to %s", len(self.data), path)
        with open(path, "w") as f:
            f.write(pack(self.data))
