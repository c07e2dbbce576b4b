import pytest

from minikernel.buddy import (
    PAGE_SIZE,
    AllocationError,
    BuddyAllocator,
    suitable_size,
)


def free_pages(allocator):
    return sum(len(indices) << level for level, indices in enumerate(allocator.free_lists()))


def test_fresh_allocator_is_one_block():
    allocator = BuddyAllocator(8)
    lists = allocator.free_lists()
    assert lists[-1] == [0]
    assert all(not indices for indices in lists[:-1])


def test_first_allocation_is_page_zero():
    allocator = BuddyAllocator(8)
    assert allocator.alloc(4) == 0


def test_alloc_then_free_restores_lists():
    allocator = BuddyAllocator(16)
    before = allocator.free_lists()
    address = allocator.alloc(4)
    assert free_pages(allocator) == 15
    allocator.free(address // PAGE_SIZE)
    assert allocator.free_lists() == before


def test_allocations_do_not_overlap():
    allocator = BuddyAllocator(32)
    sizes = [4, 8, 16, 4, 32, 8]
    spans = []
    for size in sizes:
        address = allocator.alloc(size)
        spans.append((address, address + suitable_size(size) * 1024))
    spans.sort()
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start
    assert free_pages(allocator) == 32 - sum(suitable_size(s) // 4 for s in sizes)


def test_block_is_aligned_to_its_size():
    allocator = BuddyAllocator(16)
    allocator.alloc(4)
    address = allocator.alloc(16)
    assert address % (4 * PAGE_SIZE) == 0


def test_exhaustion_raises():
    allocator = BuddyAllocator(4)
    addresses = {allocator.alloc(4) for _ in range(4)}
    assert len(addresses) == 4
    with pytest.raises(AllocationError):
        allocator.alloc(4)


def test_request_larger_than_memory_raises():
    allocator = BuddyAllocator(8)
    with pytest.raises(AllocationError):
        allocator.alloc(64)


def test_free_unallocated_raises():
    allocator = BuddyAllocator(8)
    with pytest.raises(AllocationError):
        allocator.free(3)


def test_double_free_raises():
    allocator = BuddyAllocator(8)
    index = allocator.alloc(8) // PAGE_SIZE
    allocator.free(index)
    with pytest.raises(AllocationError):
        allocator.free(index)


def test_free_out_of_range_raises():
    allocator = BuddyAllocator(8)
    with pytest.raises(IndexError):
        allocator.free(8)


def test_reserved_pages_are_not_free():
    allocator = BuddyAllocator(8, reserved=[(0, PAGE_SIZE)])
    assert free_pages(allocator) == 7
    assert 0 not in {i for indices in allocator.free_lists() for i in indices}


def test_freeing_reserved_page_merges_everything():
    allocator = BuddyAllocator(8, reserved=[(0, PAGE_SIZE)])
    allocator.free(0)
    assert allocator.free_lists() == BuddyAllocator(8).free_lists()


def test_reserve_outside_memory_raises():
    allocator = BuddyAllocator(8)
    with pytest.raises(ValueError):
        allocator.reserve(0, 9 * PAGE_SIZE)


def test_reserve_inside_merged_block_raises():
    allocator = BuddyAllocator(8)
    with pytest.raises(AllocationError):
        allocator.reserve(PAGE_SIZE, 2 * PAGE_SIZE)


def test_page_count_must_be_power_of_two():
    with pytest.raises(ValueError):
        BuddyAllocator(12)


def test_suitable_size_minimum():
    assert suitable_size(1) == 4


@pytest.mark.parametrize("size", [1, 3, 4, 5, 31, 64, 100, 1000])
def test_suitable_size_is_tight_power_of_two(size):
    result = suitable_size(size)
    assert result >= size
    assert result & (result - 1) == 0
    assert result == 4 or result // 2 < size


def test_dump_layout():
    text = BuddyAllocator(8).dump()
    assert text.startswith("----------- list ----------\n")
    assert text.endswith("\n----------------------------\n")
    assert "head[00000003]: 00000000 \n" in text
    assert "head[00000000]: \n" in text