# Credits: Bobba Research Team - 2026

import struct


class BufferUnderrun(Exception):
    def __init__(self, offset: int, wanted: int, available: int):
        super().__init__(offset, wanted, available)
        self.offset = offset
        self.wanted = wanted
        self.available = available

    def __str__(self):
        return f"wanted {self.wanted} bytes at offset {self.offset}, only {self.available} available"


class SwfReader:
    """Little endian cursor over an in-memory SWF body.

    Slices are handed out as memoryviews of the original buffer, nothing is copied.
    """

    def __init__(self, buffer, base_offset: int = 0):
        self.f = memoryview(buffer)  # buffer
        self.offset = 0
        # Position of this buffer within the whole file, only used for error reporting
        self.base_offset = base_offset

    """
    name len range
    u8  | 1 | 0 to 255
    u16 | 2 | 0 to 65535
    u32 | 4 | 0 to 4294967295
    """

    def btell(self):
        return self.base_offset + self.offset

    def remaining(self):
        return len(self.f) - self.offset

    def require(self, length):
        if length > self.remaining():
            raise BufferUnderrun(self.btell(), length, self.remaining())

    ### Buffer Get

    def bget_u8(self):
        self.require(1)
        val = self.f[self.offset]; self.offset += 1
        return val
    def bget_u16(self):
        self.require(2)
        val = struct.unpack_from("<H", self.f, offset=self.offset)[0]; self.offset += 2
        return val
    def bget_u32(self):
        self.require(4)
        val = struct.unpack_from("<I", self.f, offset=self.offset)[0]; self.offset += 4
        return val

    # other
    def bget(self, length):
        self.require(length)
        val = self.f[self.offset:self.offset + length]; self.offset += length
        return val

    def bget_rest(self):
        return self.bget(self.remaining())

    def bget_string_c(self):
        end = self.offset
        while end < len(self.f) and self.f[end] != 0:
            end += 1
        if end == len(self.f):
            # No terminator before the end of the buffer
            raise BufferUnderrun(self.btell(), end - self.offset + 1, self.remaining())

        string = bytes(self.f[self.offset:end]).decode("utf-8", errors="replace")
        self.offset = end + 1
        return string

    def bget_rect(self):
        """Read a bit packed RECT, returns (x_min, x_max, y_min, y_max) in twips."""
        self.require(1)
        nbits = self.f[self.offset] >> 3
        total_bits = 5 + nbits * 4
        byte_count = (total_bits + 7) // 8
        self.require(byte_count)

        bits = int.from_bytes(self.f[self.offset:self.offset + byte_count], "big")
        bits_left = byte_count * 8 - 5

        values = []
        for _ in range(4):
            bits_left -= nbits
            value = (bits >> bits_left) & ((1 << nbits) - 1) if nbits else 0
            # sign extend
            if nbits and value & (1 << (nbits - 1)):
                value -= 1 << nbits
            values.append(value)

        self.offset += byte_count
        return tuple(values)
