import pyrtl

from ..model import FifoConfig
from ..module import Module
from ..wiresorts import Free, Giving


class Fifo(Module):
    """ Hardware synchronous FIFO with registered read data.

        Inputs: reset, write_request, write_data, read_request.
        Outputs: read_data, full, empty; none of them depends combinationally
        on an input.
    """

    def __init__(self, bitwidth=8, depth=4, name=""):
        self._config = FifoConfig(bitwidth, depth)
        super().__init__(name=name)

    @property
    def config(self):
        return self._config

    def definition(self):
        bitwidth, depth = self.config

        ######################
        # I/O
        ######################
        reset = self.Input(1, 'reset', sort=Free)
        write_request = self.Input(1, 'write_request', sort=Free)
        write_data = self.Input(bitwidth, 'write_data', sort=Free)
        read_request = self.Input(1, 'read_request', sort=Free)
        read_data = self.Output(bitwidth, 'read_data', sort=Giving)
        full = self.Output(1, 'full', sort=Giving)
        empty = self.Output(1, 'empty', sort=Giving)

        ######################
        # Internal state
        ######################
        ixw = max(1, (depth - 1).bit_length())
        queue = pyrtl.MemBlock(bitwidth, ixw)
        count = pyrtl.Register(depth.bit_length())
        read_ix, write_ix = pyrtl.Register(ixw), pyrtl.Register(ixw)
        last_output = pyrtl.Register(bitwidth)

        ######################
        # Combinational logic
        ######################
        full <<= count == depth
        empty <<= count == 0
        read_data <<= last_output

        enqueue = write_request & ~full
        dequeue = read_request & ~empty
        head = queue[read_ix]

        ######################
        # Sequential logic
        ######################
        # Enqueue new data
        with pyrtl.conditional_assignment:
            with enqueue & ~reset:
                queue[write_ix] |= write_data
        # Update read index
        with pyrtl.conditional_assignment:
            with reset:
                read_ix.next |= 0
            with dequeue:
                with read_ix == depth - 1:
                    read_ix.next |= 0
                with pyrtl.otherwise:
                    read_ix.next |= read_ix + 1
        # Update write index
        with pyrtl.conditional_assignment:
            with reset:
                write_ix.next |= 0
            with enqueue:
                with write_ix == depth - 1:
                    write_ix.next |= 0
                with pyrtl.otherwise:
                    write_ix.next |= write_ix + 1
        # Latch the dequeued value
        with pyrtl.conditional_assignment:
            with reset:
                last_output.next |= 0
            with dequeue:
                last_output.next |= head
        # Update count
        with pyrtl.conditional_assignment:
            with reset:
                count.next |= 0
            with enqueue & ~dequeue:
                count.next |= count + 1
            with dequeue & ~enqueue:
                count.next |= count - 1


def output_fifo_to_verilog(dest_file, bitwidth=8, depth=4):
    """ Elaborate a Fifo in the working block and write the block as Verilog.

        The FIFO's IO become the block's IO; the FIFO's own synchronous reset
        input is used, so no extra reset is added.
    """
    fifo = Fifo(bitwidth, depth)
    fifo.to_block_io()
    pyrtl.output_to_verilog(dest_file, add_reset=False)
    return fifo
