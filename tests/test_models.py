from autowork.models import WorkPriorities, Worker, WorkType, move_element

COOKING = WorkType("Cooking", 1)
HAULING = WorkType("Hauling", 2)
CLEANING = WorkType("Cleaning", 3)


def test_shifted_rotates_left_by_shift() -> None:
    priorities = WorkPriorities.of(COOKING, HAULING, CLEANING)

    assert priorities.shifted(0) == [COOKING, HAULING, CLEANING]
    assert priorities.shifted(1) == [HAULING, CLEANING, COOKING]
    assert priorities.shifted(2) == [CLEANING, COOKING, HAULING]
    assert priorities.shifted(4) == priorities.shifted(1)


def test_shifted_empty_list_stays_empty() -> None:
    assert WorkPriorities().shifted(3) == []


def test_priority_list_edits_apply_immediately() -> None:
    priorities = WorkPriorities.of(COOKING, HAULING)
    priorities.add(CLEANING)
    priorities.move(CLEANING, -5)
    assert list(priorities) == [CLEANING, COOKING, HAULING]

    priorities.replace(COOKING, WorkType("Doctor", 0))
    priorities.remove(HAULING)
    assert [item.name for item in priorities] == ["Cleaning", "Doctor"]
    assert CLEANING in priorities
    assert len(priorities) == 2


def test_move_element_clamps_to_bounds() -> None:
    items = ["a", "b", "c"]
    move_element(items, "a", 10)
    assert items == ["b", "c", "a"]
    move_element(items, "a", 0)
    assert items == ["b", "c", "a"]


def test_workers_hash_by_identity() -> None:
    first = Worker("ada")
    second = Worker("ada")

    assert first != second
    assert len({first, second}) == 2


def test_worker_priorities_default_to_zero() -> None:
    worker = Worker("ada", disabled_work_types={HAULING})
    worker.set_priority(COOKING, 2)

    assert worker.get_priority(COOKING) == 2
    assert worker.get_priority(CLEANING) == 0
    assert worker.is_disabled(HAULING)
    assert worker.any_disabled([COOKING, HAULING])
    assert not worker.any_disabled([COOKING, CLEANING])
