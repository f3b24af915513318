import pytest

from worldterrain.perlin import MT19937, PerlinNoise

SAMPLES = [
    (0.1, 0.2, 0.3),
    (1.5, 2.25, 3.75),
    (-4.3, 7.9, 0.01),
    (12.345, -6.789, 100.5),
    (0.999, 0.001, 0.5),
    (55.5, 66.6, 77.7),
]


def test_mt19937_ten_thousandth_output_for_default_seed():
    rng = MT19937(5489)
    value = None
    for _ in range(10000):
        value = rng.next_u32()
    assert value == 4123659995


def test_mt19937_is_deterministic_and_32_bit():
    a = MT19937(12345)
    b = MT19937(12345)
    first = [a.next_u32() for _ in range(700)]
    assert first == [b.next_u32() for _ in range(700)]
    assert all(0 <= v < 2**32 for v in first)


def test_mt19937_different_seeds_differ():
    a = [MT19937(1).next_u32() for _ in range(1)]
    b = [MT19937(2).next_u32() for _ in range(1)]
    assert a[0] != b[0] or a == b and False


def test_default_permutation_is_reference_table():
    state = PerlinNoise().serialize()
    assert state[:3] == bytes([151, 160, 137])
    assert state[-3:] == bytes([61, 156, 180])
    assert sorted(state) == list(range(256))


def test_seeded_permutation_is_a_permutation():
    state = PerlinNoise(54321).serialize()
    assert len(state) == 256
    assert sorted(state) == list(range(256))


def test_same_seed_same_table_and_reseed_matches():
    noise = PerlinNoise(7)
    assert noise.serialize() == PerlinNoise(7).serialize()
    noise.reseed(99)
    assert noise.serialize() == PerlinNoise(99).serialize()
    assert PerlinNoise(7).serialize() != PerlinNoise(99).serialize()


def test_engine_object_seeds_like_integer():
    assert PerlinNoise(MT19937(42)).serialize() == PerlinNoise(42).serialize()


def test_deserialize_round_trip():
    source = PerlinNoise(2024)
    target = PerlinNoise()
    target.deserialize(source.serialize())
    assert target.serialize() == source.serialize()
    for x, y, z in SAMPLES:
        assert target.noise3d(x, y, z) == source.noise3d(x, y, z)


def test_deserialize_rejects_wrong_length():
    with pytest.raises(ValueError):
        PerlinNoise().deserialize(bytes(10))


def test_deserialize_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        PerlinNoise().deserialize([300] * 256)


@pytest.mark.parametrize("point", [(0, 0, 0), (1, 2, 3), (-5, 17, 250), (300, -1, 8)])
def test_noise_vanishes_on_lattice_points(point):
    assert PerlinNoise(11).noise3d(*point) == 0.0


@pytest.mark.parametrize("seed", [None, 1, 77777])
def test_noise_in_range(seed):
    noise = PerlinNoise(seed)
    for x, y, z in SAMPLES:
        assert -1.0 <= noise.noise3d(x, y, z) <= 1.0
        assert 0.0 <= noise.noise3d_01(x, y, z) <= 1.0


def test_noise_period_is_256():
    noise = PerlinNoise(5)
    for x, y, z in SAMPLES:
        assert noise.noise3d(x + 256, y, z) == pytest.approx(noise.noise3d(x, y, z), abs=1e-9)


def test_lower_dimensions_use_default_coordinates():
    noise = PerlinNoise(3)
    assert noise.noise1d(1.7) == noise.noise3d(1.7, 0.12345, 0.34567)
    assert noise.noise2d(1.7, 2.2) == noise.noise3d(1.7, 2.2, 0.34567)


def test_remapped_noise_relation():
    noise = PerlinNoise(3)
    for x, y, _ in SAMPLES:
        assert noise.noise2d_01(x, y) == pytest.approx((noise.noise2d(x, y) + 1) / 2)
        assert noise.noise1d_01(x) == pytest.approx((noise.noise1d(x) + 1) / 2)


def test_single_octave_equals_plain_noise():
    noise = PerlinNoise(8)
    for x, y, z in SAMPLES:
        assert noise.octave3d(x, y, z, 1) == noise.noise3d(x, y, z)
        assert noise.octave2d(x, y, 1) == noise.noise2d(x, y)
        assert noise.octave1d(x, 1) == noise.noise1d(x)


def test_zero_persistence_keeps_first_octave_only():
    noise = PerlinNoise(8)
    for x, y, _ in SAMPLES:
        assert noise.octave2d(x, y, 5, 0.0) == pytest.approx(noise.noise2d(x, y))
        assert noise.normalized_octave2d(x, y, 5, 0.0) == pytest.approx(noise.noise2d(x, y))


def test_zero_octaves_is_zero():
    assert PerlinNoise(8).octave3d(1.3, 2.4, 3.5, 0) == 0.0


def test_clamped_and_remapped_octaves_stay_in_bounds():
    noise = PerlinNoise(123)
    for x, y, z in SAMPLES:
        assert -1.0 <= noise.octave3d_11(x, y, z, 6) <= 1.0
        assert -1.0 <= noise.octave2d_11(x, y, 6) <= 1.0
        assert -1.0 <= noise.octave1d_11(x, 6) <= 1.0
        assert 0.0 <= noise.octave3d_01(x, y, z, 6) <= 1.0
        assert 0.0 <= noise.octave2d_01(x, y, 6) <= 1.0
        assert 0.0 <= noise.octave1d_01(x, 6) <= 1.0


def test_normalized_octaves_stay_in_bounds():
    noise = PerlinNoise(321)
    for x, y, z in SAMPLES:
        assert -1.0 <= noise.normalized_octave3d(x, y, z, 4) <= 1.0
        assert -1.0 <= noise.normalized_octave1d(x, 4) <= 1.0
        assert 0.0 <= noise.normalized_octave3d_01(x, y, z, 4) <= 1.0
        assert 0.0 <= noise.normalized_octave2d_01(x, y, 4) <= 1.0
        assert 0.0 <= noise.normalized_octave1d_01(x, 4) <= 1.0


def test_normalized_single_octave_matches_octave():
    noise = PerlinNoise(9)
    for x, y, z in SAMPLES:
        assert noise.normalized_octave3d(x, y, z, 1) == noise.octave3d(x, y, z, 1)
        assert noise.normalized_octave1d_01(x, 1) == pytest.approx(noise.noise1d_01(x))