"""
Tests for the UUID Generator.

============================================================
TEST SCENARIOS
============================================================
1. Uniqueness for every algorithm
2. Output formats
3. Ordering (utc_random non-decreasing, sequential increasing)
4. Prefix rollover
5. Argument errors fail before any state change
6. Concurrent sequential generation
7. Default generator lifecycle

============================================================
"""

import re
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from core.clock import MockClock, reset_clock, set_clock
from core.exceptions import InvalidArgument, UnknownAlgorithm
from identifiers import (
    RandomSource,
    UUIDAlgorithm,
    UUIDGenerator,
    get_generator,
    reset_generator,
)
from identifiers.generator import COUNTER_CEILING, MAX_INCREMENT


HEX32 = re.compile(r"^[0-9a-f]{32}$")
ALGORITHMS = ["random", "utc_random", "sequential"]


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def generator():
    """Fresh generator."""
    return UUIDGenerator()


@pytest.fixture
def frozen_clock():
    """Clock frozen at a known microsecond."""
    return MockClock(datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=timezone.utc))


# ============================================================
# TEST: UNIQUENESS
# ============================================================

class TestUniqueness:
    """Generated identifiers never repeat."""
    
    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    @pytest.mark.parametrize("count", [10, 10_000])
    def test_ids_are_pairwise_distinct(self, algorithm, count):
        uuids = UUIDGenerator().next(count, algorithm)
        
        assert len(uuids) == count
        assert len(set(uuids)) == count
    
    def test_independent_instances_use_different_prefixes(self):
        first = UUIDGenerator().next()
        second = UUIDGenerator().next()
        
        assert first[:26] != second[:26]


# ============================================================
# TEST: FORMATS
# ============================================================

class TestFormats:
    """Identifier string layouts."""
    
    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_all_algorithms_yield_32_lowercase_hex(self, generator, algorithm):
        for uuid in generator.next(50, algorithm):
            assert HEX32.match(uuid), uuid
    
    def test_single_id_is_a_string(self, generator):
        assert isinstance(generator.next(1, "random"), str)
    
    def test_many_ids_are_a_list(self, generator):
        assert isinstance(generator.next(2, "random"), list)
    
    def test_utc_random_prefix_encodes_microseconds(self, frozen_clock):
        generator = UUIDGenerator(clock=frozen_clock)
        expected = "%014x" % frozen_clock.micros()
        
        uuids = generator.next(3, "utc_random")
        
        assert all(u[:14] == expected for u in uuids)
        assert len({u[14:] for u in uuids}) == 3
    
    def test_utc_random_micros_match_wall_clock(self, frozen_clock):
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        micros = (frozen_clock.now() - epoch) // timedelta(microseconds=1)
        
        uuid = UUIDGenerator(clock=frozen_clock).next(1, "utc_random")
        
        assert int(uuid[:14], 16) == micros
    
    def test_sequential_is_prefix_plus_counter(self, generator):
        uuid = generator.next(1, "sequential")
        
        assert uuid[:26] == generator.prefix
        assert int(uuid[26:], 16) == generator.counter
    
    def test_enum_algorithm_accepted(self, generator):
        assert HEX32.match(generator.next(1, UUIDAlgorithm.RANDOM))
    
    def test_seeded_generators_are_reproducible(self):
        assert UUIDGenerator(seed=7).next(5, "random") == UUIDGenerator(seed=7).next(5, "random")
    
    def test_strong_source(self):
        generator = UUIDGenerator(strong=True)
        
        assert len(set(generator.next(100, "sequential"))) == 100


# ============================================================
# TEST: ORDERING
# ============================================================

class TestOrdering:
    """Time-ordered and sequential identifiers sort by generation."""
    
    def test_utc_random_is_non_decreasing(self, generator):
        first = generator.next(1, "utc_random")
        second = generator.next(1, "utc_random")
        
        assert second[:14] >= first[:14]
    
    def test_utc_random_sorts_by_time(self, frozen_clock):
        generator = UUIDGenerator(clock=frozen_clock)
        
        first = generator.next(1, "utc_random")
        frozen_clock.advance(microseconds=1)
        second = generator.next(1, "utc_random")
        
        assert first < second
    
    def test_process_clock_is_used_by_default(self, frozen_clock):
        set_clock(frozen_clock)
        try:
            uuid = UUIDGenerator().next(1, "utc_random")
        finally:
            reset_clock()
        
        assert int(uuid[:14], 16) == frozen_clock.micros()
    
    def test_sequential_is_strictly_increasing(self, generator):
        first = generator.next(1, "sequential")
        second = generator.next(1, "sequential")
        
        assert first < second
    
    def test_sequential_batch_increases_within_epoch(self, generator):
        uuids = generator.next(1_000, "sequential")
        
        for previous, current in zip(uuids, uuids[1:]):
            if previous[:26] == current[:26]:
                assert previous < current


# ============================================================
# TEST: ROLLOVER
# ============================================================

class TestRollover:
    """Prefix epochs end when the counter nears its ceiling."""
    
    @pytest.mark.parametrize("trial", range(3))
    def test_rollover_count_within_bounds(self, trial):
        generator = UUIDGenerator()
        prefix = generator.next()[:26]
        
        n = 0
        while generator.next()[:26] == prefix:
            n += 1
        
        assert 4096 <= n <= 16_773_120
    
    def test_rollover_with_maximal_increments(self):
        with patch.object(RandomSource, "randint", return_value=MAX_INCREMENT):
            generator = UUIDGenerator()
            prefix = generator.prefix
            
            calls = 0
            while True:
                calls += 1
                uuid = generator.next()
                if uuid[:26] != prefix:
                    break
        
        assert calls == COUNTER_CEILING // MAX_INCREMENT
        assert generator.counter == MAX_INCREMENT
    
    def test_counter_stays_below_six_hex_digits(self, generator):
        for uuid in generator.next(20_000, "sequential"):
            assert len(uuid) == 32


# ============================================================
# TEST: ARGUMENT ERRORS
# ============================================================

class TestArgumentErrors:
    """Bad arguments fail fast without side effects."""
    
    @pytest.mark.parametrize("count,algorithm", [(0, "sequential"), (-1, "random"), (1.5, "random")])
    def test_non_positive_count_rejected(self, generator, count, algorithm):
        prefix, counter = generator.prefix, generator.counter
        
        with pytest.raises(InvalidArgument):
            generator.next(count, algorithm)
        
        assert (generator.prefix, generator.counter) == (prefix, counter)
    
    def test_unknown_algorithm_rejected(self, generator):
        prefix, counter = generator.prefix, generator.counter
        
        with pytest.raises(UnknownAlgorithm) as excinfo:
            generator.next(1, "bogus")
        
        assert "bogus" in str(excinfo.value)
        assert (generator.prefix, generator.counter) == (prefix, counter)
    
    def test_errors_consume_no_randomness(self, generator):
        with patch.object(RandomSource, "hex_bytes") as hex_bytes, \
                patch.object(RandomSource, "randint") as randint:
            with pytest.raises(InvalidArgument):
                generator.next(0, "sequential")
            with pytest.raises(UnknownAlgorithm):
                generator.next(1, "bogus")
        
        hex_bytes.assert_not_called()
        randint.assert_not_called()


# ============================================================
# TEST: CONCURRENCY
# ============================================================

class TestConcurrency:
    """Sequential generation is atomic per instance."""
    
    def test_threads_never_collide(self, generator):
        results = []
        lock = threading.Lock()
        
        def worker():
            uuids = [generator.next() for _ in range(2_000)]
            with lock:
                results.append(uuids)
        
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        
        flat = [u for uuids in results for u in uuids]
        assert len(flat) == len(set(flat)) == 16_000
        for uuids in results:
            for previous, current in zip(uuids, uuids[1:]):
                if previous[:26] == current[:26]:
                    assert previous < current


# ============================================================
# TEST: DEFAULT GENERATOR
# ============================================================

class TestDefaultGenerator:
    """Process-wide generator is created lazily and reused."""
    
    def test_default_generator_is_shared(self):
        reset_generator()
        
        assert get_generator() is get_generator()
    
    def test_reset_creates_a_new_epoch(self):
        first = get_generator()
        reset_generator()
        
        assert get_generator() is not first
