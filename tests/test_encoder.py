import unittest

from tiled2gba.constants import MODE_AFFINE, MODE_REGULAR
from tiled2gba.encoder import (
    encode_affine_layer,
    encode_layers,
    encode_regular_cell,
    encode_regular_layer,
    is_valid_size,
    sanitize_identifier,
    screenblocks,
    to_hex,
    validate_size,
)
from tiled2gba.errors import InvalidSizeError
from tiled2gba.model import BLANK_CELL, Cell, Layer

from tests.helpers import make_layer


class TestSanitizeIdentifier(unittest.TestCase):
    def test_replaces_invalid_characters(self):
        self.assertEqual(sanitize_identifier("My Layer #1"), "My_Layer__1")

    def test_keeps_hyphen_and_underscore(self):
        self.assertEqual(sanitize_identifier("bg-0_main"), "bg-0_main")

    def test_idempotent(self):
        once = sanitize_identifier("wörld map (v2).tmx")
        self.assertEqual(sanitize_identifier(once), once)

    def test_empty_string(self):
        self.assertEqual(sanitize_identifier(""), "")


class TestToHex(unittest.TestCase):
    def test_pads_to_four_digits(self):
        self.assertEqual(to_hex(5), "0x0005")
        self.assertEqual(to_hex(0), "0x0000")

    def test_uppercase(self):
        self.assertEqual(to_hex(0xabc), "0x0ABC")

    def test_padding_is_a_minimum(self):
        self.assertEqual(to_hex(0x12345), "0x12345")
        self.assertEqual(to_hex(0x1F, 2), "0x1F")

    def test_negative_rejected(self):
        self.assertRaises(ValueError, to_hex, -1)


class TestValidateSize(unittest.TestCase):
    def test_affine_sizes(self):
        for size in (16, 32, 64, 128):
            self.assertTrue(is_valid_size(size, size, MODE_AFFINE))
        self.assertFalse(is_valid_size(30, 30, MODE_AFFINE))
        self.assertFalse(is_valid_size(32, 64, MODE_AFFINE))
        self.assertFalse(is_valid_size(256, 256, MODE_AFFINE))

    def test_regular_sizes(self):
        self.assertTrue(is_valid_size(32, 32, MODE_REGULAR))
        self.assertTrue(is_valid_size(96, 256, MODE_REGULAR))
        self.assertFalse(is_valid_size(33, 32, MODE_REGULAR))
        self.assertFalse(is_valid_size(32, 16, MODE_REGULAR))
        self.assertFalse(is_valid_size(0, 32, MODE_REGULAR))

    def test_affine_message(self):
        with self.assertRaises(InvalidSizeError) as ctx:
            validate_size(30, 30, MODE_AFFINE)
        self.assertIn("Map must be 16x16, 32x32, 64x64 or 128x128 in size.", str(ctx.exception))

    def test_regular_message(self):
        with self.assertRaises(InvalidSizeError) as ctx:
            validate_size(33, 32, MODE_REGULAR)
        self.assertIn("Map width and height must be a multiple of 32.", str(ctx.exception))

    def test_unknown_mode(self):
        self.assertRaises(ValueError, validate_size, 32, 32, "snes")


class TestRegularCell(unittest.TestCase):
    def test_plain_id(self):
        self.assertEqual(encode_regular_cell(Cell(5)), 0x0005)

    def test_horizontal_flip(self):
        self.assertEqual(encode_regular_cell(Cell(5, True, False)), 0x0405)

    def test_vertical_flip(self):
        self.assertEqual(encode_regular_cell(Cell(5, False, True)), 0x0805)

    def test_both_flips(self):
        self.assertEqual(encode_regular_cell(Cell(5, True, True)), 0x0C05)

    def test_blank_ignores_flips(self):
        self.assertEqual(encode_regular_cell(Cell(None, True, True)), 0x0000)


class TestAffineLayer(unittest.TestCase):
    def test_all_blank(self):
        for size in (16, 32, 64, 128):
            encoded = encode_affine_layer(make_layer("bg", size, size), size, size)
            self.assertEqual(len(encoded.entries), size * size)
            self.assertEqual(set(encoded.entries), {0})

    def test_row_major(self):
        layer = make_layer("bg", 16, 16, lambda x, y: Cell(y * 16 + x))
        encoded = encode_affine_layer(layer, 16, 16)
        self.assertEqual(list(encoded.entries), list(range(256)))

    def test_flips_not_encoded(self):
        layer = make_layer("bg", 16, 16, lambda x, y: Cell(3, True, True))
        encoded = encode_affine_layer(layer, 16, 16)
        self.assertEqual(set(encoded.entries), {3})

    def test_non_tile_layer(self):
        encoded = encode_affine_layer(Layer("objects", 16, 16, False), 16, 16)
        self.assertFalse(encoded.is_tile_layer)
        self.assertEqual(encoded.entries, ())
        self.assertEqual(encoded.length, 256)

    def test_name_sanitized(self):
        encoded = encode_affine_layer(make_layer("My Layer #1", 16, 16), 16, 16)
        self.assertEqual(encoded.name, "My_Layer__1")


class TestRegularLayer(unittest.TestCase):
    def test_screenblock_order(self):
        width, height = 64, 64
        layer = make_layer("bg", width, height, lambda x, y: Cell(y * width + x))
        encoded = encode_regular_layer(layer, width, height)

        expected = []
        for block_y in range(2):
            for block_x in range(2):
                for y in range(32):
                    for x in range(32):
                        expected.append((block_y * 32 + y) * width + block_x * 32 + x)
        self.assertEqual(list(encoded.entries), expected)
        self.assertEqual(encoded.screenblock_count, 4)

    def test_wide_map(self):
        width, height = 96, 32
        layer = make_layer("bg", width, height, lambda x, y: Cell(x // 32))
        encoded = encode_regular_layer(layer, width, height)
        self.assertEqual(len(encoded.entries), width * height)
        blocks = list(screenblocks(encoded))
        self.assertEqual(len(blocks), 3)
        for index, block in enumerate(blocks):
            self.assertEqual(set(block), {index})

    def test_flip_packing(self):
        layer = make_layer("bg", 32, 32, lambda x, y: Cell(5, x == 0, y == 0))
        encoded = encode_regular_layer(layer, 32, 32)
        self.assertEqual(encoded.entries[0], 0x0C05)
        self.assertEqual(encoded.entries[1], 0x0805)
        self.assertEqual(encoded.entries[32], 0x0405)
        self.assertEqual(encoded.entries[33], 0x0005)

    def test_blank_cells(self):
        layer = make_layer("bg", 32, 32, lambda x, y: Cell(None, True, True))
        encoded = encode_regular_layer(layer, 32, 32)
        self.assertEqual(set(encoded.entries), {0})

    def test_non_tile_layer(self):
        encoded = encode_regular_layer(Layer("objects", 32, 32, False), 32, 32)
        self.assertEqual(encoded.entries, ())
        self.assertEqual(encoded.screenblock_count, 0)

    def test_smaller_layer_padded_with_blanks(self):
        layer = make_layer("bg", 16, 16, lambda x, y: Cell(1))
        encoded = encode_regular_layer(layer, 32, 32)
        self.assertEqual(len(encoded.entries), 1024)
        self.assertEqual(encoded.entries[15], 1)
        self.assertEqual(encoded.entries[16], 0)

    def test_oversized_id_warns(self):
        layer = make_layer("bg", 32, 32, lambda x, y: Cell(0x400) if x == 0 and y == 0 else BLANK_CELL)
        with self.assertLogs("tiled2gba.encoder", level="WARNING"):
            encoded = encode_regular_layer(layer, 32, 32)
        self.assertEqual(encoded.entries[0], 0x400)


class TestEncodeLayers(unittest.TestCase):
    def test_validates_before_encoding(self):
        self.assertRaises(InvalidSizeError, encode_layers, [], 30, 30, MODE_AFFINE)

    def test_preserves_layer_order(self):
        layers = [make_layer(name, 32, 32) for name in ("a", "b", "c")]
        encoded = encode_layers(layers, 32, 32, MODE_REGULAR)
        self.assertEqual([e.name for e in encoded], ["a", "b", "c"])


if __name__ == "__main__":
    unittest.main()
