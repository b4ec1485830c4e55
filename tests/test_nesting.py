"""Tests for shelf nesting module."""

import logging

import pytest

from cutplan.nesting.shelf_nester import (
    NestingConfig,
    PlacedPiece,
    Sheet,
    ShelfNester,
    UnplaceablePartError,
    create_nester,
    pack,
)
from cutplan.parts.part import Material, Part


SHEET_W = 2730
SHEET_H = 1830
KERF = 3
TRIM = 10


def white(part_id, width, height, quantity=1):
    return Part(id=part_id, name=f"White {part_id}", width=width, height=height,
                quantity=quantity, material=Material.WHITE)


def wood(part_id, width, height, quantity=1):
    return Part(id=part_id, name=f"Wood {part_id}", width=width, height=height,
                quantity=quantity, material=Material.WOOD)


@pytest.fixture
def mixed_parts():
    """A kitchen-sized mix of wood and white parts."""
    return [
        white("1", 700, 500, quantity=4),
        wood("2", 400, 900, quantity=3),
        white("3", 550, 720, quantity=6),
        white("4", 2000, 600, quantity=2),
        wood("5", 1200, 300, quantity=5),
        white("6", 300, 300, quantity=10),
        white("7", 1800, 1000, quantity=2),
    ]


def assert_layout_valid(sheets, sheet_w=SHEET_W, sheet_h=SHEET_H, trim=TRIM):
    for sheet in sheets:
        for item in sheet.items:
            assert item.x >= trim
            assert item.y >= trim
            assert item.x + item.width <= sheet_w - trim
            assert item.y + item.height <= sheet_h - trim

        items = list(sheet.items)
        for i, a in enumerate(items):
            for b in items[i + 1:]:
                assert not a.overlaps(b), f"{a.uid} overlaps {b.uid} on sheet {sheet.id}"

        assert sheet.used_area == sum(item.width * item.height for item in sheet.items)


class TestNestingConfig:
    """Tests for NestingConfig dataclass."""

    def test_default_config(self):
        """Test default configuration."""
        config = NestingConfig()

        assert config.sheet_width == 2730
        assert config.sheet_height == 1830
        assert config.kerf == 3
        assert config.trim == 10
        assert config.usable_width == 2710
        assert config.usable_height == 1810

    def test_invalid_config(self):
        """Test rejected configurations."""
        with pytest.raises(ValueError):
            NestingConfig(sheet_width=0)
        with pytest.raises(ValueError):
            NestingConfig(kerf=-1)
        with pytest.raises(ValueError):
            NestingConfig(sheet_width=100, sheet_height=100, trim=50)

    def test_round_trip_dict(self):
        """Test config serialization."""
        config = NestingConfig(sheet_width=2750, sheet_height=1840)
        restored = NestingConfig.from_dict(config.to_dict())

        assert restored == config


class TestPlacedPiece:
    """Tests for PlacedPiece dataclass."""

    def test_immutable(self):
        """Test placed pieces cannot be moved after placement."""
        piece = PlacedPiece("1-0", "1", "Side", 10, 10, 100, 50, False, Material.WHITE)

        with pytest.raises(AttributeError):
            piece.x = 20

    def test_overlaps(self):
        """Test rectangle intersection."""
        a = PlacedPiece("a", "1", "A", 0, 0, 100, 100, False, Material.WHITE)
        b = PlacedPiece("b", "1", "B", 50, 50, 100, 100, False, Material.WHITE)
        c = PlacedPiece("c", "1", "C", 100, 0, 100, 100, False, Material.WHITE)

        assert a.overlaps(b)
        assert not a.overlaps(c)  # Shared edge only


class TestExpansion:
    """Tests for piece expansion and orientation."""

    def test_quantity_expansion(self):
        """Test each unit gets its own id."""
        pieces = ShelfNester().expand([white("7", 700, 500, quantity=3)])

        assert [p.uid for p in pieces] == ["7-0", "7-1", "7-2"]

    def test_white_rotated_to_landscape(self):
        """Test white pieces are laid with width >= height."""
        piece = ShelfNester().expand([white("1", 400, 800)])[0]

        assert (piece.width, piece.height) == (800, 400)
        assert piece.rotated is True

    def test_wood_keeps_orientation(self):
        """Test wood pieces never rotate."""
        piece = ShelfNester().expand([wood("1", 400, 800)])[0]

        assert (piece.width, piece.height) == (400, 800)
        assert piece.rotated is False

    def test_sort_tallest_first(self):
        """Test BFDH ordering by height then width."""
        nester = ShelfNester()
        pieces = nester.sort_pieces(nester.expand([
            wood("a", 300, 200),
            wood("b", 500, 600),
            wood("c", 700, 600),
        ]))

        assert [p.part.id for p in pieces] == ["c", "b", "a"]


class TestPacking:
    """Tests for shelf packing."""

    def test_empty_input(self):
        """Test nothing to pack yields no sheets."""
        assert pack([], SHEET_W, SHEET_H, KERF, TRIM) == []

    def test_single_shelf(self):
        """Test three 700x500 pieces share one shelf."""
        sheets = pack([white("1", 700, 500, quantity=3)], SHEET_W, SHEET_H, KERF, TRIM)

        assert len(sheets) == 1
        sheet = sheets[0]
        assert len(sheet.shelves) == 1
        assert [item.x for item in sheet.items] == [10, 713, 1416]
        assert all(item.y == 10 for item in sheet.items)
        assert sheet.shelves[0].used_width == 3 * (700 + KERF)

    def test_fourth_piece_opens_second_shelf(self):
        """Test a full shelf pushes the next piece onto a new shelf below."""
        # 2109 + 700 + 3 = 2812 > 2710 usable width
        sheets = pack([white("1", 700, 500, quantity=4)], SHEET_W, SHEET_H, KERF, TRIM)

        assert len(sheets) == 1
        assert len(sheets[0].shelves) == 2
        last = sheets[0].items[-1]
        assert (last.x, last.y) == (TRIM, 500 + KERF + TRIM)

    def test_shorter_piece_joins_taller_shelf(self):
        """Test a short piece fills the remaining width of a tall shelf."""
        sheets = pack([wood("a", 300, 200), wood("b", 600, 500)], SHEET_W, SHEET_H, KERF, TRIM)

        b, a = sheets[0].items
        assert (b.x, b.y) == (10, 10)
        assert (a.x, a.y) == (10 + 600 + KERF, 10)
        assert len(sheets[0].shelves) == 1

    def test_used_width_capped_at_usable_width(self):
        """Test a full-width piece leaves the shelf exactly full."""
        sheets = pack([white("1", 2709, 500), white("2", 400, 300)], SHEET_W, SHEET_H, KERF, TRIM)

        shelves = sheets[0].shelves
        assert shelves[0].used_width == 2710
        assert all(shelf.used_width <= 2710 for shelf in shelves)
        # Nothing else fits beside it
        assert len(shelves) == 2
        assert sheets[0].items[1].y == 500 + KERF + TRIM

    def test_summary_logged_at_debug(self, caplog):
        """Test the packing summary is not logged above debug."""
        with caplog.at_level(logging.DEBUG, logger="cutplan"):
            pack([white("1", 700, 500)], SHEET_W, SHEET_H, KERF, TRIM)

        summary = [r for r in caplog.records if r.getMessage().startswith("Packed ")]
        assert len(summary) == 1
        assert summary[0].levelno == logging.DEBUG

    def test_new_shelf_spaced_by_kerf(self):
        """Test shelves are separated by the kerf."""
        sheets = pack([white("a", 2000, 1000), white("b", 2000, 700)], SHEET_W, SHEET_H, KERF, TRIM)

        assert len(sheets) == 1
        shelves = sheets[0].shelves
        assert shelves[1].origin_y == 1000 + KERF
        assert sheets[0].items[1].y == 1000 + KERF + TRIM

    def test_opens_new_sheets(self):
        """Test pieces that fit nowhere open new sheets."""
        sheets = pack([white("1", 1800, 1000, quantity=3)], SHEET_W, SHEET_H, KERF, TRIM)

        assert [s.id for s in sheets] == [1, 2, 3]
        assert all(len(s.items) == 1 for s in sheets)
        assert all(s.used_area == 1_800_000 for s in sheets)

    def test_earlier_sheet_reused(self):
        """Test small pieces go back to the first sheet with room."""
        sheets = pack(
            [white("big", 1800, 1000, quantity=2), white("small", 500, 400, quantity=2)],
            SHEET_W, SHEET_H, KERF, TRIM,
        )

        assert len(sheets) == 2
        first_ids = [item.part_id for item in sheets[0].items]
        assert first_ids == ["big", "small", "small"]

    def test_layout_invariants(self, mixed_parts):
        """Test bounds, overlap and area invariants on a realistic job."""
        sheets = pack(mixed_parts, SHEET_W, SHEET_H, KERF, TRIM)

        assert len(sheets) >= 2
        assert_layout_valid(sheets)
        total = sum(len(s.items) for s in sheets)
        assert total == sum(p.quantity for p in mixed_parts)

    def test_material_policies(self, mixed_parts):
        """Test wood keeps its size and white is always landscape."""
        sources = {p.id: p for p in mixed_parts}
        sheets = pack(mixed_parts, SHEET_W, SHEET_H, KERF, TRIM)

        for sheet in sheets:
            for item in sheet.items:
                source = sources[item.part_id]
                if item.material == Material.WOOD:
                    assert (item.width, item.height) == (source.width, source.height)
                    assert item.rotated is False
                else:
                    assert item.width >= item.height

    def test_deterministic(self, mixed_parts):
        """Test identical input gives identical layouts."""
        first = pack(mixed_parts, SHEET_W, SHEET_H, KERF, TRIM)
        second = pack(list(mixed_parts), SHEET_W, SHEET_H, KERF, TRIM)

        assert first == second

    def test_result_is_frozen(self):
        """Test sheets cannot be mutated after packing."""
        sheet = pack([white("1", 700, 500)], SHEET_W, SHEET_H, KERF, TRIM)[0]

        assert isinstance(sheet, Sheet)
        assert isinstance(sheet.items, tuple)
        with pytest.raises(AttributeError):
            sheet.used_area = 0

    def test_source_parts_untouched(self):
        """Test packing does not alter the part specifications."""
        part = white("1", 400, 800, quantity=2)
        pack([part], SHEET_W, SHEET_H, KERF, TRIM)

        assert (part.width, part.height, part.quantity) == (400, 800, 2)

    def test_other_sheet_size(self):
        """Test a different stock sheet and saw."""
        nester = create_nester(sheet_width=2750, sheet_height=1840, kerf=4, trim=15)
        sheets = nester.pack([white("1", 600, 400, quantity=12)])

        assert_layout_valid(sheets, sheet_w=2750, sheet_h=1840, trim=15)


class TestUnplaceable:
    """Tests for oversized parts."""

    def test_too_wide_white(self):
        """Test 2800x600 cannot fit a 2730x1830 sheet in any orientation."""
        with pytest.raises(UnplaceablePartError) as exc_info:
            pack([white("1", 2800, 600)], SHEET_W, SHEET_H, KERF, TRIM)

        err = exc_info.value
        assert err.usable_width == 2710
        assert err.usable_height == 1810
        assert err.piece.width == 2800

    def test_tall_wood_not_rotated_to_fit(self):
        """Test grain-locked wood is not rotated to make it fit."""
        with pytest.raises(UnplaceablePartError):
            pack([wood("1", 600, 2000)], SHEET_W, SHEET_H, KERF, TRIM)

    def test_white_rotated_into_fit(self):
        """Test a tall white part is laid landscape and fits."""
        sheets = pack([white("1", 600, 2000)], SHEET_W, SHEET_H, KERF, TRIM)

        item = sheets[0].items[0]
        assert (item.width, item.height, item.rotated) == (2000, 600, True)

    def test_exactly_usable_size(self):
        """Test a piece the size of the usable area fits."""
        sheets = pack([white("1", 2710, 1810)], SHEET_W, SHEET_H, KERF, TRIM)

        assert len(sheets) == 1
        assert_layout_valid(sheets)
