"""Tests for the PRNG and seed helpers."""

import pytest

from py_climategrid.core.alea_prng import AleaPRNG
from py_climategrid.utils.random import cell_seed, coordinate_prng, derive_seeds, pair_coordinates


class TestAleaPRNG:
    """Test the Alea generator."""

    def test_same_seed_same_sequence(self):
        first = AleaPRNG(12345)
        second = AleaPRNG(12345)

        assert [first.random() for _ in range(20)] == [second.random() for _ in range(20)]
        assert first.call_count == 20

    def test_string_and_int_seeds_match(self):
        assert AleaPRNG("777").random() == AleaPRNG(777).random()

    def test_range(self):
        prng = AleaPRNG("range")
        for _ in range(1000):
            value = prng.random()
            assert 0.0 <= value < 1.0

    def test_randint_is_inclusive(self):
        prng = AleaPRNG(5)
        values = {prng.randint(-2, 2) for _ in range(500)}
        assert values == {-2, -1, 0, 1, 2}

    def test_randint_single_value(self):
        assert AleaPRNG(1).randint(3, 3) == 3

    def test_randint_empty_range(self):
        with pytest.raises(ValueError):
            AleaPRNG(1).randint(3, 2)


class TestSeedHelpers:
    """Test coordinate pairing and seed mixing."""

    def test_pairing_known_values(self):
        assert pair_coordinates(0, 0) == 0
        assert pair_coordinates(-1, 0) == 1
        assert pair_coordinates(0, -1) == 2
        assert pair_coordinates(1, 0) == 3
        assert pair_coordinates(0, 1) == 5

    def test_pairing_is_injective(self):
        seeds = {pair_coordinates(x, z) for x in range(-30, 30) for z in range(-30, 30)}
        assert len(seeds) == 60 * 60

    def test_pairing_is_not_symmetric(self):
        assert pair_coordinates(3, 7) != pair_coordinates(7, 3)

    def test_coordinate_prng_is_stable(self):
        assert coordinate_prng(10, -4).random() == coordinate_prng(10, -4).random()
        assert coordinate_prng(10, -4).random() != coordinate_prng(-4, 10).random()

    def test_cell_seed_mixing(self):
        assert cell_seed(0, 0, 0, 0) == 0
        assert cell_seed(1, 2, 3, 1) == ((1 * 31 + 2) * 31 + 3) * 31 + 1
        assert cell_seed(5, 1, 1, 0) != cell_seed(5, 1, 1, 1)

    def test_cell_seed_wraps_to_64_bits(self):
        seed = cell_seed(2**62, 123, -456, 1)
        assert -(2**63) <= seed < 2**63

    def test_derive_seeds(self):
        seeds = derive_seeds(("climate", 42), 2)

        assert seeds == derive_seeds(("climate", 42), 2)
        assert seeds != derive_seeds(("climate", 43), 2)
        assert len(set(seeds)) == 2
        assert all(0 <= seed < 2**31 for seed in seeds)
