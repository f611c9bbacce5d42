from autowork.models import Worker
from autowork.plugins import CallableFitness, SkillFitness
from autowork.ranking import FitnessComparator, sort_by_fitness
from autowork.request import ResolveRequest
from autowork.roles import Role


def _lookup(scores: dict[str, float]) -> CallableFitness:
    return CallableFitness(lambda worker, role, request: scores.get(worker.name, 0.0))


def test_higher_fitness_sorts_first() -> None:
    ada = Worker("ada", skills={"cooking": 3})
    bo = Worker("bo", skills={"cooking": 8})
    role = Role("Cook", fitness=[SkillFitness("cooking")])
    request = ResolveRequest(workers=[ada, bo])

    assert sort_by_fitness([ada, bo], role, request) == [bo, ada]


def test_later_functions_break_ties() -> None:
    ada, bo, cy = Worker("ada"), Worker("bo"), Worker("cy")
    role = Role(
        "Cook",
        fitness=[
            _lookup({"ada": 1.0, "bo": 1.0, "cy": 0.0}),
            _lookup({"ada": 0.0, "bo": 5.0, "cy": 9.0}),
        ],
    )
    request = ResolveRequest(workers=[ada, bo, cy])

    assert sort_by_fitness([ada, bo, cy], role, request) == [bo, ada, cy]


def test_comparator_is_antisymmetric() -> None:
    ada, bo = Worker("ada"), Worker("bo")
    role = Role("Cook", fitness=[_lookup({"ada": 2.0}), _lookup({"bo": 7.0})])
    comparator = FitnessComparator(role.fitness, role, ResolveRequest(workers=[ada, bo]))

    assert comparator.compare(ada, bo) == -1
    assert comparator.compare(bo, ada) == 1
    assert comparator.compare(ada, ada) == 0


def test_full_tie_is_equal_and_keeps_input_order() -> None:
    ada, bo = Worker("ada"), Worker("bo")
    role = Role("Cook", fitness=[_lookup({}), _lookup({"ada": 1e-12})])
    request = ResolveRequest(workers=[ada, bo])
    comparator = FitnessComparator(role.fitness, role, request)

    assert comparator.compare(ada, bo) == 0
    assert sort_by_fitness([bo, ada], role, request) == [bo, ada]


def test_no_fitness_functions_keeps_input_order() -> None:
    workers = [Worker(name) for name in ("ada", "bo", "cy")]
    role = Role("Haul")

    assert sort_by_fitness(workers, role, ResolveRequest(workers=workers)) == workers


def test_cascade_stops_at_first_decisive_function() -> None:
    calls: list[str] = []

    def _second(worker: Worker, role: Role, request: ResolveRequest) -> float:
        calls.append(worker.name)
        return 0.0

    ada, bo = Worker("ada"), Worker("bo")
    role = Role("Cook", fitness=[_lookup({"ada": 1.0}), CallableFitness(_second)])
    comparator = FitnessComparator(role.fitness, role, ResolveRequest(workers=[ada, bo]))

    assert comparator.compare(ada, bo) == -1
    assert calls == []
