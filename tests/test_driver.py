import io
import unittest

from syncfifo.buffer import SyncFifo
from syncfifo.driver import FifoSimulation, FifoTrace, step_lists
from syncfifo.fifoexceptions import FifoError


class TestFifoSimulation(unittest.TestCase):

    def setUp(self):
        self.sim = FifoSimulation(bitwidth=8, depth=2)

    def test_run_compact_trace(self):
        inputs = {
            'reset':         '100000',
            'write_request': '011100',
            'write_data':    '012300',
            'read_request':  '000011',
        }
        expected = {
            'read_data': '000001',
            'full':      '000110',
            'empty':     '110000',
        }
        self.sim.step_multiple(inputs, expected)

        output = io.StringIO()
        self.sim.tracer.print_trace(output, compact=True)
        self.assertEqual(
            output.getvalue(),
            "        empty 110000\n"
            "         full 000110\n"
            "    read_data 000001\n"
            " read_request 000011\n"
            "        reset 100000\n"
            "   write_data 012300\n"
            "write_request 011100\n")
        self.assertEqual(self.sim.fifo.read_data, 2)
        self.assertTrue(self.sim.fifo.empty)

    def test_end_to_end(self):
        sim = FifoSimulation(bitwidth=8, depth=4)
        inputs = {
            'reset':         [1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
            'write_request': [0, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0],
            'write_data':    [0, 0x11, 0x22, 0x33, 0x44, 0x55, 0, 0, 0, 0, 0],
            'read_request':  [0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 0],
        }
        expected = {
            'read_data': [0, 0, 0, 0, 0, 0, 0, 0x11, 0x22, 0x33, 0x44],
            'full':      [0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 0],
            'empty':     [1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1],
        }
        sim.step_multiple(inputs, expected)
        self.assertEqual(sim.fifo.dropped_writes, 1)
        self.assertEqual(sim.inspect('read_data'), 0x44)

    def test_hex_trace(self):
        self.sim.step({'write_request': 1, 'write_data': 0xab})
        self.sim.step({'read_request': 1})
        self.sim.step()
        output = io.StringIO()
        self.sim.tracer.print_trace(output, base=16)
        lines = output.getvalue().splitlines()
        self.assertEqual(lines[2], "    read_data  0  0 ab")
        self.assertEqual(lines[5], "   write_data ab  0  0")

    def test_bad_trace_base(self):
        with self.assertRaises(FifoError):
            self.sim.tracer.print_trace(io.StringIO(), base=3)

    def test_mismatch_reported(self):
        output = io.StringIO()
        with self.assertRaises(FifoError) as ex:
            self.sim.step_multiple(
                {'write_request': '11', 'write_data': '45'},
                {'empty': '00'},
                file=output)
        self.assertEqual(str(ex.exception), 'Unexpected FIFO output on 1 signal step(s)')
        self.assertEqual(
            output.getvalue(),
            "Unexpected output on one or more steps:\n"
            "  step 0, empty: 0 expected, 1 computed\n")

    def test_stop_after_first_error(self):
        output = io.StringIO()
        with self.assertRaises(FifoError):
            self.sim.step_multiple({'read_request': '111'}, {'empty': '000'},
                                   file=output, stop_after_first_error=True)
        self.assertEqual(len(self.sim.tracer), 1)
        self.assertTrue(output.getvalue().startswith(
            'Unexpected output (stopped after step with first error):\n'))

    def test_unknown_signals(self):
        with self.assertRaises(FifoError):
            self.sim.step({'data_in': 1})
        with self.assertRaises(FifoError):
            self.sim.step_multiple({'reset': '0'}, {'data_out': '0'})
        with self.assertRaises(FifoError):
            self.sim.inspect('data_out')

    def test_failed_tick_not_traced(self):
        self.sim.step({'write_request': 1, 'write_data': 7})
        with self.assertRaises(FifoError):
            self.sim.step({'write_request': 1, 'write_data': 0x100})
        self.assertEqual(len(self.sim.tracer), self.sim.fifo.ticks)
        self.assertEqual(len(self.sim.tracer), 1)
        self.assertEqual(self.sim.inspect('empty'), 1)
        self.sim.step({'read_request': 1})
        self.assertEqual(len(self.sim.tracer), self.sim.fifo.ticks)
        self.assertEqual(self.sim.tracer.trace['write_data'], [7, 0])

    def test_non_numeric_input(self):
        with self.assertRaises(FifoError) as ex:
            self.sim.step({'write_data': 'x'})
        self.assertEqual(str(ex.exception), 'Value \'x\' for input "write_data" is not a number')
        with self.assertRaises(FifoError):
            self.sim.step({'reset': None})
        with self.assertRaises(FifoError):
            self.sim.step_multiple({'write_data': 'a1'})
        self.assertEqual(self.sim.fifo.ticks, 0)

    def test_wraps_existing_fifo(self):
        fifo = SyncFifo(bitwidth=4, depth=3)
        sim = FifoSimulation(fifo, tracer=False)
        sim.step_multiple(nsteps=2, provided_inputs={'write_request': '11', 'write_data': '78'})
        self.assertEqual(fifo.count, 2)
        self.assertIsNone(sim.tracer)


class TestStepLists(unittest.TestCase):

    def test_strings_and_lists(self):
        inputs, nsteps = step_lists({'reset': '10', 'write_data': [200, 3]})
        self.assertEqual(inputs, {'reset': [1, 0], 'write_data': [200, 3]})
        self.assertEqual(nsteps, 2)

    def test_unequal_lengths(self):
        with self.assertRaises(FifoError):
            step_lists({'reset': '10', 'read_request': '1'})

    def test_nsteps(self):
        self.assertEqual(step_lists({}, nsteps=3), ({}, 3))
        self.assertEqual(step_lists({'reset': '1000'}, nsteps=2)[1], 2)
        with self.assertRaises(FifoError):
            step_lists({'reset': '1'}, nsteps=2)
        with self.assertRaises(FifoError):
            step_lists({})


class TestFifoTrace(unittest.TestCase):

    def test_empty_trace(self):
        trace = FifoTrace(('a', 'bb'))
        self.assertEqual(len(trace), 0)
        output = io.StringIO()
        trace.print_trace(output)
        self.assertEqual(output.getvalue(), " a \nbb \n")


if __name__ == "__main__":
    unittest.main()
