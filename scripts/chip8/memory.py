MEMORY_SIZE = 4096


class OutOfBoundsError(IndexError):
    """raised whenever an address, or the end of a multi-byte span, falls outside the memory"""
    def __init__(self, address, length=1):
        super().__init__(f"Memory access out of bounds: 0x{address:04x} (+{length}) with size 0x{MEMORY_SIZE:04x}")
        self.address = address
        self.length = length


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
# wraparound is never done here, callers are in charge of it
class Memory:
    def __init__(self, size=MEMORY_SIZE):
        self.size = size
        self.inner = bytearray(size)

    def _check(self, address, length=1):
        if address < 0 or length < 0 or address + length > self.size:
            raise OutOfBoundsError(address, length)

    def reset(self):
        """zero the whole memory"""
        self.inner[:] = bytes(self.size)

    def write_u8(self, address: int, value: int):
        self._check(address)
        self.inner[address] = value & 0xFF

    def write_range(self, start: int, data):
        """copy data verbatim starting at start, nothing gets written if the span doesn't fit"""
        self._check(start, len(data))
        self.inner[start:start+len(data)] = bytes(data)

    def read_u8(self, address: int) -> int:
        self._check(address)
        return self.inner[address]

    def read_u16(self, address: int) -> int:
        """big endian: high byte at address, low byte at address + 1"""
        self._check(address, 2)
        return self.inner[address] << 8 | self.inner[address + 1]

    def read_range(self, address: int, length: int) -> memoryview:
        """return a read only view over length bytes starting at address"""
        self._check(address, length)
        return memoryview(self.inner)[address:address+length].toreadonly()
