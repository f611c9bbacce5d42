import json
from pathlib import Path
from typing import Any

import pytest

from autowork.plugins import PercentageAmount, SkillAtLeastCondition, SkillFitness
from autowork.scenario import ScenarioError, build_scenario, load_scenario


def _scenario_data() -> dict[str, Any]:
    return {
        "work_types": [
            {"name": "Doctor", "natural_priority": 1},
            {"name": "Cooking", "natural_priority": 2},
            "Hauling",
        ],
        "maps": [{"name": "colony"}, {"name": "mine", "parent": "colony"}],
        "workers": [
            {"name": "ada", "skills": {"medicine": 8}},
            {"name": "bo", "skills": {"medicine": 2}, "disabled": ["Doctor"]},
            {"name": "cy", "map": "mine", "priorities": {"Hauling": 2}},
        ],
        "roles": [
            {
                "name": "Medic",
                "target": 1,
                "specialist": True,
                "priorities": ["Doctor"],
                "conditions": [{"type": "skill_at_least", "skill": "medicine", "level": 5}],
                "fitness": [{"type": "skill", "skill": "medicine"}],
            },
            {
                "name": "Cook",
                "target": {"type": "percentage", "fraction": 1.0},
                "commitment": 0.5,
                "priorities": ["Cooking"],
                "count_from": ["Medic"],
            },
            {"name": "Miner", "map": "mine", "target": 1},
        ],
        "excluded": [],
        "dedications": {"Miner": ["cy"]},
    }


def test_build_scenario_wires_session() -> None:
    scenario = build_scenario(_scenario_data())
    session = scenario.session

    assert [item.name for item in session.work_types] == ["Doctor", "Cooking", "Hauling"]
    assert session.work_type("Hauling").natural_priority == 0
    assert scenario.default_map.name == "colony"
    assert session.graph.find("mine").parent == scenario.default_map.index
    assert len(session.managers()) == 2
    assert [manager.map.name for manager in session.root_managers()] == ["colony"]


def test_roles_and_plugins_are_parsed() -> None:
    scenario = build_scenario(_scenario_data())
    manager = scenario.manager()
    medic, cook = manager.roles

    assert medic.specialist is True
    assert medic.conditions == [SkillAtLeastCondition("medicine", 5)]
    assert medic.fitness == [SkillFitness("medicine")]
    assert cook.target_workers == PercentageAmount(1.0)
    assert cook.commitment == 0.5
    assert cook.count_from == [medic]

    miner = scenario.manager("mine").roles[0]
    cy = scenario.session.graph.find("mine").workers[0]
    assert scenario.manager("mine").dedications.dedicated_workers(miner) == [cy]


def test_scenario_resolves_end_to_end() -> None:
    scenario = build_scenario(_scenario_data())
    manager = scenario.manager()

    summary = manager.resolve_work_assignments()
    ada, bo, cy = manager.all_workers()
    medic, cook = manager.roles

    assert manager.workers_assigned_to(medic) == [ada]
    assert manager.is_assigned_to(bo, cook)
    assert manager.count_assigned_to(cook) == 3
    assert summary.under_filled == []
    assert ada.get_priority(scenario.session.work_type("Doctor")) == 1
    assert bo.get_priority(scenario.session.work_type("Cooking")) == 1
    assert cy.get_priority(scenario.session.work_type("Hauling")) == 2


def test_excluded_workers_apply_to_every_manager() -> None:
    data = _scenario_data()
    data["excluded"] = ["cy"]
    scenario = build_scenario(data)

    for manager in scenario.session.managers():
        assert manager.worker_filter.excluded == {"cy"}


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda data: data["workers"].append({"name": "ada"}), "Duplicate worker"),
        (lambda data: data["workers"][0].update(disabled=["Mining"]), "Unknown work type"),
        (lambda data: data["maps"].append({"name": "x", "parent": "nowhere"}), "Unknown parent"),
        (lambda data: data["roles"][1].update(count_from=["Ghost"]), "Unknown role 'Ghost'"),
        (lambda data: data["roles"][0]["fitness"].append({"type": "luck"}), "Invalid role"),
        (lambda data: data.update(excluded=["zed"]), "Unknown excluded worker"),
        (lambda data: data.update(dedications={"Medic": ["zed"]}), "Unknown worker"),
        (lambda data: data["roles"][1].update(commitment="high"), "Invalid role 'Cook'"),
        (lambda data: data["workers"][0].update(skills=[1]), "Invalid worker 'ada'"),
        (
            lambda data: data["workers"][0].update(skills={"medicine": "lots"}),
            "Invalid worker 'ada'",
        ),
        (lambda data: data["roles"][0].update(suspended="false"), "must be true or false"),
        (lambda data: data["workers"][1].update(dead="no"), "must be true or false"),
        (
            lambda data: data["work_types"][0].update(natural_priority="first"),
            "Invalid work type 'Doctor'",
        ),
        (lambda data: data.update(dedications={"Medic": "ada"}), "must be a list of worker"),
        (lambda data: data["roles"][1].update(count_from="Medic"), "must be a list of role"),
    ],
)
def test_malformed_scenarios_raise(mutate, message: str) -> None:
    data = _scenario_data()
    mutate(data)

    with pytest.raises(ScenarioError, match=message):
        build_scenario(data)


def test_unknown_map_lookup_raises() -> None:
    scenario = build_scenario({})

    assert scenario.default_map.name == "home"
    with pytest.raises(ScenarioError, match="Unknown map"):
        scenario.manager("attic")


def test_load_scenario_reports_file_errors(tmp_path: Path) -> None:
    with pytest.raises(ScenarioError, match="not found"):
        load_scenario(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ScenarioError, match="not valid JSON"):
        load_scenario(broken)

    valid = tmp_path / "valid.json"
    valid.write_text(json.dumps(_scenario_data()), encoding="utf-8")
    assert load_scenario(valid).manager().find_role("Cook") is not None


def test_role_flags_keep_their_boolean_value() -> None:
    data = _scenario_data()
    data["roles"][1].update(suspended=False, critical=True)

    cook = build_scenario(data).manager().find_role("Cook")

    assert cook.suspended is False
    assert cook.critical is True
