"""
Co-simulation of the behavioral FIFO model against the PyRTL Fifo.
"""

import pyrtl

from .driver import INPUT_NAMES, OUTPUT_NAMES, FifoSimulation, step_lists
from .fifoexceptions import FifoError
from .model import check_invariants
from .rtllib.fifos import Fifo


def cosimulate(provided_inputs, bitwidth=8, depth=4, nsteps=None):
    """ Drive the model and the hardware with the same stimulus, tick by tick.

        :param provided_inputs: map from input name to per-step values (see
            FifoSimulation.step_multiple); missing inputs are held at 0
        :param bitwidth: FIFO data width
        :param depth: FIFO depth
        :param nsteps: number of ticks; defaults to the stimulus length
        :return: (model simulation, pyrtl simulation)

        The hardware is elaborated into the current working block. The model's
        invariants are checked after every tick and the first step on which
        read_data, full or empty differ raises FifoError.
    """
    inputs, nsteps = step_lists(provided_inputs, nsteps)

    model = FifoSimulation(bitwidth=bitwidth, depth=depth)
    fifo = Fifo(bitwidth, depth)
    fifo.to_block_io()
    rtl = pyrtl.Simulation()

    for i in range(nsteps):
        step_inputs = {name: int(inputs[name][i]) if name in inputs else 0
                       for name in INPUT_NAMES}
        model.step(step_inputs)
        check_invariants(model.fifo.config, model.fifo.state)
        rtl.step(step_inputs)
        for name in OUTPUT_NAMES:
            expected, computed = model.inspect(name), rtl.inspect(name)
            if expected != computed:
                raise FifoError(
                    'Hardware and model disagree at step %d on %s: '
                    'model %d, hardware %d' % (i, name, expected, computed))
    return model, rtl
