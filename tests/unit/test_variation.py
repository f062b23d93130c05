"""Unit tests for the bounded variation generator."""

import random

import pytest

from hospital_finance.processing.generation.variation import VariationGenerator


class FixedRandom(random.Random):
    """Random source that always yields the same draw."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.mark.unit
class TestVariationGenerator:
    """Test VariationGenerator bounds, rounding and reproducibility."""

    def test_stays_within_band(self, seeded_generator):
        """Every varied value lies within the percentage band."""
        for _ in range(500):
            value = seeded_generator.vary(1000, 15)
            assert 850 <= value <= 1150

    def test_default_percent_applies(self):
        generator = VariationGenerator(random.Random(7), default_percent=10)
        for _ in range(200):
            assert 900 <= generator.vary(1000) <= 1100

    def test_zero_percent_returns_base(self, seeded_generator):
        assert seeded_generator.vary(4321, 0) == 4321

    def test_extremes_of_the_band(self):
        """Draws at the edges map to base ± spread."""
        assert VariationGenerator(FixedRandom(0.0)).vary(1000, 10) == 900
        assert VariationGenerator(FixedRandom(0.5)).vary(1000, 10) == 1000
        assert VariationGenerator(FixedRandom(0.99999)).vary(1000, 10) == 1100

    def test_rounds_half_up(self):
        """A value exactly halfway between integers rounds up, even for negatives."""
        # 10 + (0.525 - 0.5) * 2 * 10 = 10.5
        assert VariationGenerator(FixedRandom(0.525)).vary(10, 100) == 11
        # -10 + (0.475 - 0.5) * 2 * -10 = -9.5
        assert VariationGenerator(FixedRandom(0.475)).vary(-10, 100) == -9

    def test_negative_base_band(self):
        generator = VariationGenerator(random.Random(3))
        for _ in range(200):
            assert -1150 <= generator.vary(-1000, 15) <= -850

    def test_negative_percent_rejected(self, seeded_generator):
        with pytest.raises(ValueError):
            seeded_generator.vary(100, -5)

    def test_negative_default_percent_rejected(self):
        with pytest.raises(ValueError):
            VariationGenerator(default_percent=-1)

    def test_injected_stream_is_reproducible(self):
        first = VariationGenerator(random.Random(99))
        second = VariationGenerator(random.Random(99))
        assert [first.vary(1_000_000) for _ in range(20)] == [second.vary(1_000_000) for _ in range(20)]

    def test_for_key_depends_only_on_seed_and_key(self):
        a = VariationGenerator.for_key(42, "general-1", 2024)
        b = VariationGenerator.for_key(42, "general-1", 2024)
        c = VariationGenerator.for_key(42, "general-1", 2023)

        draws_a = [a.vary(1_000_000) for _ in range(10)]
        assert draws_a == [b.vary(1_000_000) for _ in range(10)]
        assert draws_a != [c.vary(1_000_000) for _ in range(10)]

    def test_for_key_without_seed_is_unseeded(self):
        generator = VariationGenerator.for_key(None, "general-1", 2024, default_percent=5)
        assert generator.default_percent == 5
        assert 950 <= generator.vary(1000) <= 1050

    def test_chance_extremes(self, seeded_generator):
        assert not any(seeded_generator.chance(0) for _ in range(50))
        assert all(seeded_generator.chance(1) for _ in range(50))

    def test_choice_picks_from_options(self, seeded_generator):
        options = ("stable", "positive", "negative")
        assert all(seeded_generator.choice(options) in options for _ in range(50))
