import unittest
from memory import MEMORY_SIZE, Memory, OutOfBoundsError


class TestMemoryAccess(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()

    def test_write_read_u8(self):
        self.mem.write_u8(0x300, 0xAB)
        self.assertEqual(self.mem.read_u8(0x300),
                         0xAB)

    def test_write_u8_keeps_lowest_byte(self):
        self.mem.write_u8(0x300, 0x1FF)
        self.assertEqual(self.mem.read_u8(0x300),
                         0xFF)

    def test_read_u16_is_big_endian(self):
        self.mem.write_range(0x200, [0x12, 0x34])
        self.assertEqual(self.mem.read_u16(0x200),
                         0x1234)

    def test_read_range(self):
        self.mem.write_range(0x400, b"\x01\x02\x03")
        self.assertEqual(bytes(self.mem.read_range(0x400, 3)),
                         b"\x01\x02\x03")

    def test_read_range_is_read_only(self):
        view = self.mem.read_range(0x400, 3)
        with self.assertRaises(TypeError):
            view[0] = 1

    def test_reset(self):
        self.mem.write_range(0x0, b"\xff" * 16)
        self.mem.reset()
        self.assertEqual(bytes(self.mem.read_range(0, MEMORY_SIZE)),
                         bytes(MEMORY_SIZE))


class TestMemoryBounds(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()

    def test_last_byte_is_addressable(self):
        self.mem.write_u8(MEMORY_SIZE - 1, 1)
        self.assertEqual(self.mem.read_u8(MEMORY_SIZE - 1),
                         1)

    def test_u8_out_of_bounds(self):
        with self.assertRaises(OutOfBoundsError):
            self.mem.read_u8(MEMORY_SIZE)
        with self.assertRaises(OutOfBoundsError):
            self.mem.write_u8(MEMORY_SIZE, 0)

    def test_u16_span_out_of_bounds(self):
        with self.assertRaises(OutOfBoundsError):
            self.mem.read_u16(MEMORY_SIZE - 1)

    def test_range_span_out_of_bounds(self):
        with self.assertRaises(OutOfBoundsError):
            self.mem.read_range(MEMORY_SIZE - 2, 3)

    def test_write_range_out_of_bounds_writes_nothing(self):
        with self.assertRaises(OutOfBoundsError):
            self.mem.write_range(MEMORY_SIZE - 2, b"\x01\x02\x03")
        self.assertEqual(self.mem.read_u8(MEMORY_SIZE - 2),
                         0)

    def test_error_is_an_index_error(self):
        with self.assertRaises(IndexError):
            self.mem.read_u8(-1)


if __name__ == "__main__":
    unittest.main()
