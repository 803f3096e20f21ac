"""
Tests for the tile and meld model
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import (
    Tile, TileSet, TileSuit, WindType, DragonType,
    man, pin, sou, wind, dragon, parse_tiles, count_tiles,
    counts_to_histogram, histogram_to_counts, tiles_from_counts,
    can_start_run, removed, added,
    suit_of, rank_of, EAST, WHITE_DRAGON, GREEN_DRAGON, RED_DRAGON,
)
from mahjong_core.melds import Meld, MeldType, run, triplet, kong, meld_counts


class TestTiles:
    """Test tile system"""

    def test_tile_creation(self):
        """Test creating tiles"""
        t1 = man(1)
        assert t1.suit == TileSuit.CHARACTERS
        assert t1.value == 1

        t2 = sou(5)
        assert t2.suit == TileSuit.BAMBOOS

        t3 = pin(9)
        assert t3.suit == TileSuit.DOTS

    def test_invalid_values(self):
        """Out-of-range values are rejected"""
        with pytest.raises(ValueError):
            man(0)
        with pytest.raises(ValueError):
            Tile(TileSuit.WINDS, 4)
        with pytest.raises(ValueError):
            Tile(TileSuit.DRAGONS, 3)

    def test_honor_and_terminal(self):
        """Test honor and terminal properties"""
        assert wind(WindType.EAST).is_honor
        assert not wind(WindType.EAST).is_terminal
        assert dragon(DragonType.RED).is_honor

        assert man(1).is_terminal and man(9).is_terminal
        assert not man(5).is_terminal
        assert man(5).is_simple
        assert not man(5).is_terminal_or_honor

    def test_green_tiles(self):
        """Test green tile identification"""
        for t in [sou(2), sou(3), sou(4), sou(6), sou(8), GREEN_DRAGON]:
            assert t.is_green, f"{t} should be green"
        for t in [sou(1), sou(5), sou(7), RED_DRAGON, man(3)]:
            assert not t.is_green, f"{t} should not be green"

    def test_tile_index_layout(self):
        """Characters 0-8, Dots 9-17, Bamboo 18-26, winds 27-30, dragons 31-33"""
        assert man(1).tile_index == 0
        assert man(9).tile_index == 8
        assert pin(1).tile_index == 9
        assert sou(9).tile_index == 26
        assert EAST.tile_index == 27
        assert dragon(DragonType.RED).tile_index == 33

    def test_index_helpers(self):
        """Suit and rank of raw indices"""
        assert suit_of(8) == TileSuit.CHARACTERS
        assert suit_of(9) == TileSuit.DOTS
        assert suit_of(30) == TileSuit.WINDS
        assert suit_of(31) == TileSuit.DRAGONS
        assert rank_of(22) == 5
        assert rank_of(WHITE_DRAGON.tile_index) == 0

    def test_index_roundtrip(self):
        """Every index maps back to itself"""
        for i in range(34):
            assert Tile.from_index(i).tile_index == i

    def test_from_index_out_of_range(self):
        """Index outside 0-33 raises"""
        with pytest.raises(ValueError):
            Tile.from_index(34)
        with pytest.raises(ValueError):
            Tile.from_index(-1)

    def test_identity_ignored(self):
        """Instance ids do not affect equality"""
        assert man(3, 0) == man(3, 2)
        assert hash(man(3, 0)) == hash(man(3, 2))

    def test_from_string(self):
        """Compact and glyph notations"""
        assert Tile.from_string("5m") == man(5)
        assert Tile.from_string("7z") == RED_DRAGON
        assert Tile.from_string("东") == EAST
        assert Tile.from_string("3条") == sou(3)
        with pytest.raises(ValueError):
            Tile.from_string("0x")

    def test_parse_tiles(self):
        """Hand notation parsing"""
        tiles = parse_tiles("123m 45p 1z")
        assert tiles == [man(1), man(2), man(3), pin(4), pin(5), EAST]
        assert [t.id for t in tiles] == list(range(6))

        with pytest.raises(ValueError):
            parse_tiles("123")
        with pytest.raises(ValueError):
            parse_tiles("m12")

    def test_runs_stay_in_suit(self):
        """Runs never cross a suit boundary or include honors"""
        assert can_start_run(man(7).tile_index)
        assert not can_start_run(man(8).tile_index)
        assert not can_start_run(pin(9).tile_index)
        assert not can_start_run(EAST.tile_index)


class TestCounts:
    """Test count arrays and histograms"""

    def test_count_tiles(self):
        """Count array of a hand"""
        counts = count_tiles(parse_tiles("112m 9s"))
        assert counts.shape == (34,)
        assert counts.dtype == np.int8
        assert counts[0] == 2
        assert counts[1] == 1
        assert counts[26] == 1
        assert counts.sum() == 4

    def test_histogram_conversion(self):
        """Histogram and array forms agree"""
        counts = count_tiles(parse_tiles("555p 1z"))
        histogram = counts_to_histogram(counts)
        assert histogram == {13: 3, 27: 1}
        assert np.array_equal(histogram_to_counts(histogram), counts)

    def test_histogram_rejects_bad_index(self):
        """Out-of-range index in a histogram raises"""
        with pytest.raises(ValueError):
            histogram_to_counts({40: 1})

    def test_tiles_from_counts(self):
        """Count array expands back into sorted tiles"""
        tiles = tiles_from_counts(count_tiles(parse_tiles("9s 1m 1m")))
        assert tiles == [man(1), man(1), sou(9)]

    def test_removed_restores(self):
        """Scoped removal restores the buffer"""
        counts = [int(c) for c in count_tiles(parse_tiles("123m"))]
        with removed(counts, 0, 1):
            assert counts[0] == 0 and counts[1] == 0
        assert counts[:3] == [1, 1, 1]

    def test_added_restores_on_error(self):
        """Scoped addition restores even when the branch raises"""
        counts = [0] * 34
        with pytest.raises(RuntimeError):
            with added(counts, 5):
                assert counts[5] == 1
                raise RuntimeError("branch failed")
        assert counts[5] == 0


class TestTileSet:
    """Test TileSet class"""

    def test_add_remove(self):
        """Test adding and removing tiles"""
        ts = TileSet()
        ts.add(man(1))
        ts.add(man(1))
        assert ts.count(man(1)) == 2
        assert ts.remove(man(1))
        assert ts.count(man(1)) == 1
        assert not ts.remove(pin(1))

    def test_unique_tiles(self):
        """Unique tiles keep first-seen order"""
        ts = TileSet(parse_tiles("33m 1p 3m"))
        assert ts.get_unique_tiles() == [man(3), pin(1)]


class TestMeld:
    """Test meld variant"""

    def test_run_creation(self):
        """Test run creation"""
        meld = run(man(4))
        assert meld.meld_type == MeldType.RUN
        assert meld.base_tile == man(4)
        assert not meld.is_pung

    def test_triplet_and_kong(self):
        """Triplets and kongs count as pungs"""
        assert triplet(EAST).is_pung
        k = kong(pin(5), concealed=True)
        assert k.is_pung
        assert k.is_concealed
        assert len(k.tiles) == 4

    def test_invalid_run(self):
        """Runs must be consecutive numbered tiles"""
        with pytest.raises(ValueError):
            Meld(MeldType.RUN, (man(1), man(2), man(4)))
        with pytest.raises(ValueError):
            Meld(MeldType.RUN, (man(8), man(9), pin(1)))
        with pytest.raises(ValueError):
            run(man(8))

    def test_invalid_triplet(self):
        """Triplet tiles must be identical"""
        with pytest.raises(ValueError):
            Meld(MeldType.TRIPLET, (man(1), man(1), man(2)))

    def test_only_kongs_concealed(self):
        """Concealed flag is reserved for kongs"""
        with pytest.raises(ValueError):
            Meld(MeldType.TRIPLET, (man(1), man(1), man(1)), is_concealed=True)

    def test_meld_counts(self):
        """Meld counts cover every tile"""
        counts = meld_counts([run(man(1)), kong(EAST)])
        assert counts[0] == 1 and counts[2] == 1
        assert counts[27] == 4
