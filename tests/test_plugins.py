import pytest

from autowork.models import Worker
from autowork.plugins import (
    FixedAmount,
    NotCondition,
    PercentageAmount,
    PluginError,
    PluginRegistry,
    SetAttributePostProcessor,
    SkillAtLeastCondition,
    TagRolePostProcessor,
    VariableAmount,
    WorkerCondition,
    default_registry,
)
from autowork.request import ResolveRequest
from autowork.roles import Role


def test_default_registry_builds_plugins_from_payloads() -> None:
    condition = default_registry.create(
        "condition", {"type": "skill_at_least", "skill": "medicine", "level": 4}
    )
    amount = default_registry.create("amount", {"type": "percentage", "fraction": 0.5})
    effect = default_registry.create(
        "post_processor", {"type": "set_attribute", "key": "area", "value": "hospital"}
    )

    assert condition == SkillAtLeastCondition("medicine", 4)
    assert amount == PercentageAmount(0.5)
    assert effect == SetAttributePostProcessor("area", "hospital")


def test_registry_rejects_unknown_types_and_bad_params() -> None:
    with pytest.raises(PluginError, match="Unknown fitness type 'telepathy'"):
        default_registry.create("fitness", {"type": "telepathy"})
    with pytest.raises(PluginError, match="Invalid condition 'has_trait'"):
        default_registry.create("condition", {"type": "has_trait", "colour": "red"})
    with pytest.raises(PluginError, match="Unknown plugin kind"):
        default_registry.create("widget", {"type": "x"})


def test_custom_registry_registration() -> None:
    registry = PluginRegistry()

    @registry.register("condition", "always")
    class AlwaysCondition(WorkerCondition):
        def is_valid(self, worker, role, request) -> bool:
            return True

    assert registry.names("condition") == ["always"]
    assert isinstance(registry.create("condition", {"type": "always"}), AlwaysCondition)
    assert registry.names("fitness") == []


def test_not_condition_wraps_nested_payload() -> None:
    condition = NotCondition({"type": "has_trait", "trait": "lazy"})
    role = Role("Haul")
    request = ResolveRequest(workers=[])

    assert condition.is_valid(Worker("ada"), role, request)
    assert not condition.is_valid(Worker("bo", traits={"lazy"}), role, request)


def test_amounts() -> None:
    workers = [Worker(str(index)) for index in range(7)]
    request = ResolveRequest(workers=workers, variables={"beds": "3"})
    role = Role("Doctor")

    assert FixedAmount(2).count(role, request) == 2
    assert FixedAmount(-4).count(role, request) == 0
    assert PercentageAmount(0.5).count(role, request) == 3
    assert PercentageAmount(2.0).count(role, request) == 7
    assert VariableAmount("beds").count(role, request) == 3
    assert VariableAmount("missing", default=1).count(role, request) == 1


def test_tag_role_post_processor_appends_once() -> None:
    worker = Worker("ada")
    role = Role("Cook")
    request = ResolveRequest(workers=[worker])
    effect = TagRolePostProcessor()

    effect.apply(worker, role, request)
    effect.apply(worker, role, request)

    assert worker.attributes["roles"] == ["Cook"]
