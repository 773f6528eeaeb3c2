"""
Environment Layer - Gymnasium 兼容环境

Modules:
    regicide_env: 主环境类
    observation: 观测空间构建
    reward: 奖励函数
    wrappers: 环境包装器
"""
from .regicide_env import (
    RegicideEnv,
    make_env,
)

from .observation import (
    MAX_ACTIONS,
    Observation,
    ObservationBuilder,
    ActionEncoder,
    get_action_encoder,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

from .wrappers import (
    FlattenObservationWrapper,
    PartnerWrapper,
    RecordEpisodeStatistics,
    wrap_env,
)

__all__ = [
    # env
    "RegicideEnv",
    "make_env",
    # observation
    "MAX_ACTIONS",
    "Observation",
    "ObservationBuilder",
    "ActionEncoder",
    "get_action_encoder",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
    # wrappers
    "FlattenObservationWrapper",
    "PartnerWrapper",
    "RecordEpisodeStatistics",
    "wrap_env",
]
