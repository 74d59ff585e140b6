import contextlib
import io
import threading
import unittest

from syncfifo import buffer
from syncfifo.buffer import SyncFifo
from syncfifo.fifoexceptions import FifoError
from syncfifo.model import FifoConfig


class TestSyncFifo(unittest.TestCase):

    def setUp(self):
        self.fifo = SyncFifo(bitwidth=8, depth=4)

    def test_starts_empty(self):
        self.assertTrue(self.fifo.empty)
        self.assertFalse(self.fifo.full)
        self.assertEqual(len(self.fifo), 0)
        self.assertEqual(self.fifo.read_data, 0)
        self.assertEqual(str(self.fifo), "SyncFifo(bitwidth=8, depth=4, count=0)")

    def test_invalid_depth(self):
        with self.assertRaises(FifoError):
            SyncFifo(depth=0)

    def test_config_is_fixed(self):
        self.assertEqual(self.fifo.config, (8, 4))
        with self.assertRaises(AttributeError):
            self.fifo.config = FifoConfig(8, 2)
        self.assertEqual(self.fifo.config.depth, 4)

    def test_write_then_read(self):
        for value in (0x11, 0x22, 0x33, 0x44):
            self.assertTrue(self.fifo.tick(write_request=True, write_data=value).write_accepted)
        self.assertTrue(self.fifo.full)
        out = self.fifo.tick(write_request=True, write_data=0x55)
        self.assertFalse(out.write_accepted)
        self.assertEqual(self.fifo.count, 4)

        values = [self.fifo.tick(read_request=True).read_data for _ in range(4)]
        self.assertEqual(values, [0x11, 0x22, 0x33, 0x44])
        self.assertTrue(self.fifo.empty)
        self.assertEqual(self.fifo.read_data, 0x44)

    def test_counters(self):
        self.fifo.tick(read_request=True)
        for value in range(6):
            self.fifo.tick(write_request=True, write_data=value)
        self.fifo.tick(reset=True, write_request=True, read_request=True)
        self.assertEqual(self.fifo.ticks, 8)
        self.assertEqual(self.fifo.dropped_reads, 1)
        self.assertEqual(self.fifo.dropped_writes, 2)

    def test_reset(self):
        self.fifo.tick(write_request=True, write_data=3)
        self.fifo.tick(read_request=True)
        self.fifo.tick(write_request=True, write_data=4)
        out = self.fifo.reset()
        self.assertTrue(out.empty)
        self.assertEqual(self.fifo.read_data, 0)
        self.assertEqual(self.fifo.state.write_ix, 0)
        self.assertEqual(self.fifo.state.read_ix, 0)

    def test_state_is_a_snapshot(self):
        before = self.fifo.state
        self.fifo.tick(write_request=True, write_data=1)
        self.assertEqual(before.count, 0)
        self.assertEqual(self.fifo.state.count, 1)

    def test_verbose_reports_drops(self):
        output = io.StringIO()
        buffer.Verbose = True
        try:
            with contextlib.redirect_stdout(output):
                self.fifo.tick(read_request=True)
        finally:
            buffer.Verbose = False
        self.assertEqual(output.getvalue(), "tick 1: read dropped, FIFO empty\n")


class TestThreadedProducerConsumer(unittest.TestCase):

    def test_order_preserved_across_threads(self):
        fifo = SyncFifo(bitwidth=16, depth=4)
        n = 500
        consumed = []

        def produce():
            for value in range(n):
                while not fifo.tick(write_request=True, write_data=value).write_accepted:
                    pass

        def consume():
            while len(consumed) < n:
                out = fifo.tick(read_request=True)
                if out.read_accepted:
                    consumed.append(out.read_data)

        threads = [threading.Thread(target=produce), threading.Thread(target=consume)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(consumed, list(range(n)))
        self.assertTrue(fifo.empty)
        self.assertTrue(0 <= fifo.count <= 4)


if __name__ == "__main__":
    unittest.main()
