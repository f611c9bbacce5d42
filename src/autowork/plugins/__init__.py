from autowork.plugins.amounts import (
    CallableAmount,
    FixedAmount,
    PercentageAmount,
    VariableAmount,
    as_amount,
)
from autowork.plugins.base import (
    PLUGIN_KINDS,
    PluginError,
    PluginRegistry,
    WorkerAmount,
    WorkerCondition,
    WorkerFitness,
    WorkerPostProcessor,
    WorkerSetting,
    default_registry,
)
from autowork.plugins.conditions import (
    CallableCondition,
    CommitmentBelowCondition,
    HasTraitCondition,
    NotCondition,
    SkillAtLeastCondition,
)
from autowork.plugins.fitness import (
    CallableFitness,
    LowCommitmentFitness,
    SkillFitness,
    TraitFitness,
)
from autowork.plugins.post_processors import (
    CallablePostProcessor,
    SetAttributePostProcessor,
    TagRolePostProcessor,
)

__all__ = [
    "PLUGIN_KINDS",
    "CallableAmount",
    "CallableCondition",
    "CallableFitness",
    "CallablePostProcessor",
    "CommitmentBelowCondition",
    "FixedAmount",
    "HasTraitCondition",
    "LowCommitmentFitness",
    "NotCondition",
    "PercentageAmount",
    "PluginError",
    "PluginRegistry",
    "SetAttributePostProcessor",
    "SkillAtLeastCondition",
    "SkillFitness",
    "TagRolePostProcessor",
    "TraitFitness",
    "VariableAmount",
    "WorkerAmount",
    "WorkerCondition",
    "WorkerFitness",
    "WorkerPostProcessor",
    "WorkerSetting",
    "as_amount",
    "default_registry",
]
