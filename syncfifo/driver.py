"""
A tick-by-tick driver for SyncFifo, shaped after pyrtl.Simulation.

Every step records the inputs of the tick together with the registered outputs
visible during that tick (before the clock edge), which is the same view the
PyRTL tracer records for the hardware Fifo.
"""

import sys

from .buffer import SyncFifo
from .fifoexceptions import FifoError
from .model import observe

INPUT_NAMES = ('reset', 'write_request', 'write_data', 'read_request')
OUTPUT_NAMES = ('read_data', 'full', 'empty')

_base_formats = {2: 'b', 8: 'o', 10: 'd', 16: 'x'}


def _as_step_values(values):
    # A string holds one decimal digit per step, like pyrtl's step_multiple
    if isinstance(values, str):
        if not values.isdigit():
            raise FifoError('Step string %s must hold decimal digits only' % repr(values))
        return [int(c) for c in values]
    return list(values)


def step_lists(provided_inputs, nsteps=None):
    """ Normalize a stimulus dictionary to per-step value lists.

        Returns (inputs, nsteps); every list in inputs is at least nsteps long.
    """
    inputs = {n: _as_step_values(v) for n, v in (provided_inputs or {}).items()}
    unknown = set(inputs) - set(INPUT_NAMES)
    if unknown:
        raise FifoError(
            'Unknown FIFO inputs %s (valid inputs are %s)'
            % (sorted(unknown), list(INPUT_NAMES)))
    lengths = set(len(v) for v in inputs.values())
    if len(lengths) > 1:
        raise FifoError('All input lists must have the same length')
    if nsteps is None:
        if not lengths:
            raise FifoError('Need either some inputs or nsteps')
        nsteps = lengths.pop()
    elif lengths and nsteps > min(lengths):
        raise FifoError(
            'nsteps (%d) is larger than the number of provided values' % nsteps)
    return inputs, nsteps


class FifoTrace(object):
    """ Per-signal history of a FifoSimulation """

    def __init__(self, names=INPUT_NAMES + OUTPUT_NAMES):
        self.trace = {name: [] for name in names}

    def add_step(self, values):
        for name, history in self.trace.items():
            history.append(values[name])

    def __len__(self):
        return len(next(iter(self.trace.values()), []))

    def print_trace(self, file=sys.stdout, base=10, compact=False):
        """ Print one line per signal, names right-aligned and sorted.

            :param file: where to write the trace
            :param base: radix for the values (2, 8, 10 or 16)
            :param compact: if True, values are concatenated without padding
        """
        if base not in _base_formats:
            raise FifoError('Unsupported trace base %s' % repr(base))
        fmt = _base_formats[base]
        names = sorted(self.trace)
        maxlen = max(len(name) for name in names)
        for name in names:
            values = [format(v, fmt) for v in self.trace[name]]
            if compact:
                line = ''.join(values)
            else:
                width = max((len(v) for v in values), default=0)
                line = ' '.join(v.rjust(width) for v in values)
            file.write('%s %s\n' % (name.rjust(maxlen), line))


class FifoSimulation(object):
    """ Drives a SyncFifo with dictionaries of per-tick signal values """

    def __init__(self, fifo=None, bitwidth=8, depth=4, tracer=True):
        self.fifo = fifo if fifo is not None else SyncFifo(bitwidth, depth)
        self.tracer = FifoTrace() if tracer else None
        self.value = self._visible_outputs()

    def _visible_outputs(self):
        read_data, full, empty = observe(self.fifo.config, self.fifo.state)
        return {'read_data': read_data, 'full': int(full), 'empty': int(empty)}

    def step(self, provided_inputs=None):
        """ Run one tick; signals not provided are held at 0 """
        provided_inputs = provided_inputs or {}
        unknown = set(provided_inputs) - set(INPUT_NAMES)
        if unknown:
            raise FifoError(
                'Unknown FIFO inputs %s (valid inputs are %s)'
                % (sorted(unknown), list(INPUT_NAMES)))
        inputs = {}
        for name in INPUT_NAMES:
            value = provided_inputs.get(name, 0)
            try:
                inputs[name] = int(value)
            except (TypeError, ValueError):
                raise FifoError(
                    'Value %s for input "%s" is not a number' % (repr(value), name))

        visible = self._visible_outputs()
        self.fifo.tick(
            reset=bool(inputs['reset']),
            write_request=bool(inputs['write_request']),
            write_data=inputs['write_data'],
            read_request=bool(inputs['read_request']),
        )

        # Only record ticks that actually happened
        self.value = visible
        if self.tracer is not None:
            values = dict(inputs)
            values.update(visible)
            self.tracer.add_step(values)

    def step_multiple(self, provided_inputs=None, expected_outputs=None, nsteps=None,
                      file=sys.stdout, stop_after_first_error=False):
        """ Run several ticks and optionally check the visible outputs.

            :param provided_inputs: map from input name to a list of values or a
                string with one decimal digit per step
            :param expected_outputs: map from output name to expected values, in
                the same format
            :param nsteps: number of steps; defaults to the length of the inputs
            :param file: where mismatches are reported
            :param stop_after_first_error: stop at the first step that mismatches

            Raises FifoError after reporting if any output mismatched.
        """
        inputs, nsteps = step_lists(provided_inputs, nsteps)
        expected = {n: _as_step_values(v) for n, v in (expected_outputs or {}).items()}

        unknown = set(expected) - set(OUTPUT_NAMES)
        if unknown:
            raise FifoError('Unknown FIFO outputs %s' % sorted(unknown))
        for name, values in expected.items():
            if len(values) < nsteps:
                raise FifoError(
                    'Expected output "%s" has %d values for %d steps'
                    % (name, len(values), nsteps))

        failures = []
        for i in range(nsteps):
            self.step({name: values[i] for name, values in inputs.items()})
            step_failures = [(i, name, values[i], self.value[name])
                             for name, values in sorted(expected.items())
                             if self.value[name] != values[i]]
            failures.extend(step_failures)
            if step_failures and stop_after_first_error:
                break

        if failures:
            if stop_after_first_error:
                file.write('Unexpected output (stopped after step with first error):\n')
            else:
                file.write('Unexpected output on one or more steps:\n')
            for i, name, exp, got in failures:
                file.write('  step %d, %s: %d expected, %d computed\n' % (i, name, exp, got))
            raise FifoError('Unexpected FIFO output on %d signal step(s)' % len(failures))

    def inspect(self, name):
        if name not in self.value:
            raise FifoError(
                'No output named "%s" (outputs are %s)' % (name, list(OUTPUT_NAMES)))
        return self.value[name]
