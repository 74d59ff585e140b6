"""
syncfifo: a fixed-depth synchronous FIFO, as a behavioral model and as PyRTL hardware.
"""

from .fifoexceptions import FifoError, FifoInternalError
from .model import (FifoConfig, FifoState, TickInputs, TickOutputs, flags, initial_state,
                    reset_state, observe, step, check_data, check_invariants)
from .buffer import SyncFifo
from .driver import FifoSimulation, FifoTrace
from .module import Module
from . import wiresorts
from .rtllib.fifos import Fifo, output_fifo_to_verilog
from .cosim import cosimulate
