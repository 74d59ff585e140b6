"""
Behavioral model of a synchronous FIFO.

The whole buffer is an immutable FifoState, and a tick is the pure transition
step(config, state, inputs) -> (next_state, outputs). Occupancy is tracked by
an explicit count; full and empty are never derived from index equality.
"""

from collections import namedtuple

from .fifoexceptions import FifoError, FifoInternalError


class FifoConfig(namedtuple('FifoConfig', 'bitwidth depth')):
    """ Construction-time parameters of a FIFO; fixed for its lifetime """

    __slots__ = ()

    def __new__(cls, bitwidth=8, depth=4):
        for name, value in (('bitwidth', bitwidth), ('depth', depth)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise FifoError(
                    'FIFO %s must be an integer, got %s' % (name, repr(value)))
            if value <= 0:
                raise FifoError(
                    'FIFO %s must be positive, got %d' % (name, value))
        return super(FifoConfig, cls).__new__(cls, bitwidth, depth)

    @classmethod
    def _make(cls, iterable):
        # _replace builds through _make; keep it validating
        return cls(*iterable)

    @property
    def max_value(self):
        return (1 << self.bitwidth) - 1


FifoState = namedtuple('FifoState', 'slots write_ix read_ix count last_output')

TickInputs = namedtuple(
    'TickInputs', 'reset write_request write_data read_request',
    defaults=(False, False, 0, False))

TickOutputs = namedtuple(
    'TickOutputs', 'read_data full empty write_accepted read_accepted')


def flags(count, depth):
    """ Return (full, empty) for the given occupancy """
    return count == depth, count == 0


def initial_state(config):
    return FifoState(
        slots=(0,) * config.depth, write_ix=0, read_ix=0, count=0, last_output=0)


def reset_state(state):
    """ Clear indices, occupancy and the output register.

        Slot contents are kept; nothing can read them until they are written again.
    """
    return state._replace(write_ix=0, read_ix=0, count=0, last_output=0)


def check_data(config, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise FifoError('Write data must be an integer, got %s' % repr(value))
    if value < 0 or value > config.max_value:
        raise FifoError(
            'Write data %d does not fit in %d bits' % (value, config.bitwidth))


def observe(config, state):
    """ The registered outputs (read_data, full, empty) visible during a tick
        that starts in `state`.
    """
    full, empty = flags(state.count, config.depth)
    return state.last_output, full, empty


def step(config, state, inputs):
    """ Apply one tick.

        :param config: the FifoConfig of the buffer
        :param state: the FifoState at the start of the tick
        :param inputs: the TickInputs for this tick
        :return: (next_state, TickOutputs); read_data, full and empty in the
            outputs are the values after the tick

        Reset wins over any request in the same tick. Otherwise the write and
        the read are each judged against the flags at the start of the tick,
        so both succeed together whenever the buffer is neither full nor empty.
    """
    if inputs.reset:
        nxt = reset_state(state)
        _, full, empty = observe(config, nxt)
        return nxt, TickOutputs(nxt.last_output, full, empty, False, False)

    full, empty = flags(state.count, config.depth)
    write_accepted = bool(inputs.write_request) and not full
    read_accepted = bool(inputs.read_request) and not empty

    slots = state.slots
    write_ix, read_ix = state.write_ix, state.read_ix
    count, last_output = state.count, state.last_output

    if write_accepted:
        check_data(config, inputs.write_data)
        slots = slots[:write_ix] + (inputs.write_data,) + slots[write_ix + 1:]
        write_ix = (write_ix + 1) % config.depth
        count += 1

    if read_accepted:
        # Pre-tick slots: an accepted write never lands on the slot being read
        last_output = state.slots[read_ix]
        read_ix = (read_ix + 1) % config.depth
        count -= 1

    nxt = FifoState(slots, write_ix, read_ix, count, last_output)
    full, empty = flags(count, config.depth)
    return nxt, TickOutputs(last_output, full, empty, write_accepted, read_accepted)


def check_invariants(config, state):
    depth = config.depth
    if len(state.slots) != depth:
        raise FifoInternalError(
            'FIFO has %d slots but depth %d' % (len(state.slots), depth))
    if not 0 <= state.count <= depth:
        raise FifoInternalError(
            'FIFO count %d outside [0, %d]' % (state.count, depth))
    for name in ('write_ix', 'read_ix'):
        ix = getattr(state, name)
        if not 0 <= ix < depth:
            raise FifoInternalError(
                'FIFO %s %d outside [0, %d]' % (name, ix, depth - 1))
    if (state.write_ix - state.read_ix) % depth != state.count % depth:
        raise FifoInternalError(
            'FIFO indices (write %d, read %d) disagree with count %d'
            % (state.write_ix, state.read_ix, state.count))
    full, empty = flags(state.count, depth)
    if full and empty:
        raise FifoInternalError('FIFO is both full and empty')
