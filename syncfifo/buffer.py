"""
Defines SyncFifo, the stateful owner of a FIFO's state.
"""

import threading

from .model import FifoConfig, TickInputs, flags, initial_state, step

Verbose = False


def _verbose_print(s):
    if Verbose:
        print(s)


class SyncFifo(object):
    """ A single-writer, single-reader FIFO advanced one tick at a time.

        The state is only changed by `tick`. The whole transition runs under
        one lock and the next state is published in a single assignment, so a
        concurrent reader sees either the state before a tick or after it.
    """

    def __init__(self, bitwidth=8, depth=4):
        """ Create an empty FIFO.

            :param bitwidth: width in bits of each stored value
            :param depth: number of slots; must be positive
        """
        self._config = FifoConfig(bitwidth, depth)
        self._state = initial_state(self.config)
        self._lock = threading.Lock()
        self.ticks = 0
        self.dropped_writes = 0
        self.dropped_reads = 0

    def tick(self, reset=False, write_request=False, write_data=0, read_request=False):
        """ Advance the FIFO by one tick and return its TickOutputs """
        inputs = TickInputs(reset, write_request, write_data, read_request)
        with self._lock:
            nxt, outputs = step(self.config, self._state, inputs)
            self._state = nxt
            self.ticks += 1
            if reset:
                _verbose_print("tick %d: reset" % self.ticks)
                return outputs
            if write_request and not outputs.write_accepted:
                self.dropped_writes += 1
                _verbose_print("tick %d: write of %s dropped, FIFO full"
                               % (self.ticks, repr(write_data)))
            if read_request and not outputs.read_accepted:
                self.dropped_reads += 1
                _verbose_print("tick %d: read dropped, FIFO empty" % self.ticks)
        return outputs

    def reset(self):
        return self.tick(reset=True)

    @property
    def config(self):
        return self._config

    @property
    def state(self):
        return self._state

    @property
    def count(self):
        return self._state.count

    @property
    def full(self):
        return flags(self._state.count, self.config.depth)[0]

    @property
    def empty(self):
        return flags(self._state.count, self.config.depth)[1]

    @property
    def read_data(self):
        return self._state.last_output

    def __len__(self):
        return self._state.count

    def __str__(self):
        return "SyncFifo(bitwidth=%d, depth=%d, count=%d)" % (
            self.config.bitwidth, self.config.depth, self.count)
