import unittest

import bcoding

from torrentmeta.bencoding.decoder import (
    INT64_MAX,
    INT64_MIN,
    MAX_DEPTH,
    BencodeDecoder,
    decode,
)
from torrentmeta.bencoding.errors import (
    DecodeError,
    IntegerOverflowError,
    InsufficientBytesError,
    InvalidDigitsError,
    NestingTooDeepError,
    UnexpectedByteError,
    UnexpectedEndError,
)
from torrentmeta.bencoding.value import ByteString, Dict, Int, List


def to_value(data):
    """Builds the tree we expect the decoder to produce for plain Python data"""
    if isinstance(data, int):
        return Int(data)
    if isinstance(data, str):
        return ByteString(data.encode("utf-8"))
    if isinstance(data, bytes):
        return ByteString(data)
    if isinstance(data, list):
        return List([to_value(item) for item in data])
    return Dict({key.encode("utf-8"): to_value(value) for key, value in data.items()})


class TestDecodeIntegers(unittest.TestCase):

    def test_non_negative_integers(self):
        for n in [0, 1, 7, 42, 123, 1024, INT64_MAX]:
            self.assertEqual(decode(f"i{n}e".encode()), Int(n))

    def test_negative_integers(self):
        for n in [1, 111, 2**40, -INT64_MIN]:
            self.assertEqual(decode(f"i-{n}e".encode()), Int(-n))

    def test_leading_zeros_are_folded(self):
        self.assertEqual(decode(b"i0005e"), Int(5))
        self.assertEqual(decode(b"i-007e"), Int(-7))
        self.assertEqual(decode(b"i-0e"), Int(0))

    def test_empty_digits(self):
        with self.assertRaises(InvalidDigitsError) as ctx:
            decode(b"ie")
        self.assertEqual(ctx.exception.position, 1)
        self.assertEqual(ctx.exception.found, b"e")

        with self.assertRaises(InvalidDigitsError):
            decode(b"i-e")

    def test_missing_terminator(self):
        with self.assertRaises(UnexpectedEndError) as ctx:
            decode(b"i12")
        self.assertEqual(ctx.exception.position, 3)

    def test_wrong_terminator(self):
        with self.assertRaises(UnexpectedByteError) as ctx:
            decode(b"i12x")
        self.assertEqual(ctx.exception.expected, b"e")
        self.assertEqual(ctx.exception.found, b"x")
        self.assertEqual(ctx.exception.position, 3)

    def test_out_of_64_bit_range(self):
        with self.assertRaises(IntegerOverflowError):
            decode(f"i{INT64_MAX + 1}e".encode())
        with self.assertRaises(IntegerOverflowError):
            decode(f"i{INT64_MIN - 1}e".encode())

    def test_very_long_digit_run(self):
        with self.assertRaises(IntegerOverflowError):
            decode(b"i" + b"9" * 5000 + b"e")
        self.assertEqual(decode(b"i" + b"0" * 5000 + b"1e"), Int(1))


class TestDecodeByteStrings(unittest.TestCase):

    def test_byte_strings(self):
        self.assertEqual(decode(b"4:spam"), ByteString(b"spam"))
        self.assertEqual(decode(b"0:"), ByteString(b""))

    def test_non_utf8_bytes_are_kept(self):
        self.assertEqual(decode(b"3:\xff\x00\xfe"), ByteString(b"\xff\x00\xfe"))

    def test_insufficient_bytes(self):
        with self.assertRaises(InsufficientBytesError) as ctx:
            decode(b"5:abc")
        self.assertEqual(ctx.exception.declared, 5)
        self.assertEqual(ctx.exception.remaining, 3)
        self.assertEqual(ctx.exception.position, 2)

    def test_missing_colon(self):
        with self.assertRaises(UnexpectedByteError) as ctx:
            decode(b"4spam")
        self.assertEqual(ctx.exception.expected, b":")
        self.assertEqual(ctx.exception.found, b"s")

        with self.assertRaises(UnexpectedEndError):
            decode(b"12")

    def test_huge_declared_length(self):
        with self.assertRaises(DecodeError):
            decode(b"9" * 40 + b":abc")


class TestDecodeContainers(unittest.TestCase):

    def test_lists(self):
        self.assertEqual(decode(b"le"), List([]))
        self.assertEqual(decode(b"li1ei2ei3ee"), List([Int(1), Int(2), Int(3)]))
        self.assertEqual(
            decode(b"l4:spam4:eggse"), List([ByteString(b"spam"), ByteString(b"eggs")])
        )

    def test_list_order_is_kept(self):
        self.assertNotEqual(decode(b"li2ei1ee"), List([Int(1), Int(2)]))

    def test_dicts(self):
        self.assertEqual(decode(b"de"), Dict({}))
        self.assertEqual(
            decode(b"d1:Ai1e1:Bi2ee"), Dict({b"A": Int(1), b"B": Int(2)})
        )

    def test_duplicate_key_last_wins(self):
        self.assertEqual(decode(b"d1:ai1e1:ai2ee"), Dict({b"a": Int(2)}))

    def test_nested(self):
        data = b"d4:dictd3:key5:value4:listl1:a1:bee5:hello5:worlde"
        expected = Dict(
            {
                b"dict": Dict(
                    {
                        b"key": ByteString(b"value"),
                        b"list": List([ByteString(b"a"), ByteString(b"b")]),
                    }
                ),
                b"hello": ByteString(b"world"),
            }
        )
        self.assertEqual(decode(data), expected)

    def test_dict_key_must_be_byte_string(self):
        with self.assertRaises(InvalidDigitsError) as ctx:
            decode(b"di1ei2ee")
        self.assertEqual(ctx.exception.position, 1)
        self.assertEqual(ctx.exception.found, b"i")

    def test_unterminated_containers(self):
        for data in [b"l", b"li1e", b"l4:spam", b"d", b"d1:a", b"d1:ai1e"]:
            with self.subTest(data=data):
                with self.assertRaises(UnexpectedEndError):
                    decode(data)

    def test_broken_element_is_not_end_of_list(self):
        with self.assertRaises(UnexpectedByteError) as ctx:
            decode(b"li1exe")
        self.assertEqual(ctx.exception.position, 4)
        self.assertEqual(ctx.exception.found, b"x")

        with self.assertRaises(InsufficientBytesError):
            decode(b"l5:abe")

    def test_broken_value_is_not_end_of_dict(self):
        with self.assertRaises(UnexpectedByteError):
            decode(b"d1:a?e")
        with self.assertRaises(UnexpectedEndError):
            decode(b"d1:ai12")

    def test_nesting_limit(self):
        depth = 100
        value = decode(b"l" * depth + b"e" * depth)
        for _ in range(depth - 1):
            self.assertEqual(len(value), 1)
            value = value.items[0]
        self.assertEqual(value, List([]))

        with self.assertRaises(NestingTooDeepError) as ctx:
            decode(b"l" * (MAX_DEPTH + 1) + b"e" * (MAX_DEPTH + 1))
        self.assertEqual(ctx.exception.limit, MAX_DEPTH)

        with self.assertRaises(NestingTooDeepError):
            decode(b"d1:a" * 10000)


class TestDecodeDispatch(unittest.TestCase):

    def test_unknown_lead_byte(self):
        with self.assertRaises(UnexpectedByteError) as ctx:
            decode(b"x")
        self.assertEqual(ctx.exception.position, 0)
        self.assertEqual(ctx.exception.found, b"x")

    def test_empty_input(self):
        with self.assertRaises(UnexpectedEndError) as ctx:
            decode(b"")
        self.assertEqual(ctx.exception.position, 0)

    def test_whitespace_is_not_tolerated(self):
        with self.assertRaises(UnexpectedByteError):
            decode(b" i1e")

    def test_every_failure_is_a_decode_error(self):
        for data in [b"i12", b"5:abc", b"x", b"", b"lxe", b"d3:keye", b"i1"]:
            with self.subTest(data=data):
                with self.assertRaises(DecodeError):
                    decode(data)

    def test_trailing_bytes_are_not_inspected(self):
        decoder = BencodeDecoder(b"i1eGARBAGE")
        self.assertEqual(decoder.decode(), Int(1))
        self.assertEqual(decoder.position, 3)

    def test_accepts_bytearray(self):
        self.assertEqual(decode(bytearray(b"4:spam")), ByteString(b"spam"))
        self.assertEqual(decode(memoryview(b"i3e")), Int(3))

    def test_error_message_names_position(self):
        with self.assertRaises(DecodeError) as ctx:
            decode(b"i12x")
        self.assertIn("position 3", str(ctx.exception))


class TestDecodeBencodedData(unittest.TestCase):

    def test_decodes_what_bcoding_encodes(self):
        samples = [
            0,
            -42,
            "spam",
            b"\x00\xff" * 10,
            [],
            [1, "two", [3, {"four": 4}]],
            {},
            {
                "announce": "http://example.com/announce",
                "info": {
                    "name": "file.bin",
                    "length": 2048,
                    "piece length": 1024,
                    "pieces": b"\x01" * 40,
                },
            },
        ]
        for sample in samples:
            with self.subTest(sample=sample):
                self.assertEqual(decode(bcoding.bencode(sample)), to_value(sample))


if __name__ == "__main__":
    unittest.main()
