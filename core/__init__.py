"""
Core Layer - 纯游戏逻辑 (无 Gym 依赖)

Modules:
    cards: 牌定义与编码
    rules: 组合规则引擎
    actions: 动作类型与生成
    config: 对局配置
    state: 阶段、事件、结果与快照
    engine: 对局状态机
    ai: 合作 AI 伙伴
"""
from .cards import (
    Card,
    Suit,
    SUITS,
    SUIT_SYMBOLS,
    RANKS,
    FACE_RANKS,
    TOTAL_ENEMIES,
    card_value,
    enemy_max_hp,
    enemy_attack,
    shuffle,
    create_deck,
    create_enemy_deck,
    card_from_id,
    cards_to_str,
    str_to_cards,
    cards_to_array,
)

from .rules import (
    ComboType,
    RuleEngine,
    MAX_COMBO_TOTAL,
    MAX_SET_SIZE,
)

from .actions import (
    ActionType,
    Action,
    PlayAction,
    YieldAction,
    DiscardAction,
    JokerAction,
    ActionGenerator,
    choose,
)

from .config import (
    JokerPolicy,
    GameConfig,
    HAND_SIZES,
)

from .state import (
    Phase,
    EventType,
    Event,
    RejectReason,
    Accepted,
    Rejected,
    ActionResult,
    Enemy,
    GameSnapshot,
)

from .engine import RegicideGame

from .ai import (
    HeuristicWeights,
    RegicideAI,
)

__all__ = [
    # cards
    "Card",
    "Suit",
    "SUITS",
    "SUIT_SYMBOLS",
    "RANKS",
    "FACE_RANKS",
    "TOTAL_ENEMIES",
    "card_value",
    "enemy_max_hp",
    "enemy_attack",
    "shuffle",
    "create_deck",
    "create_enemy_deck",
    "card_from_id",
    "cards_to_str",
    "str_to_cards",
    "cards_to_array",
    # rules
    "ComboType",
    "RuleEngine",
    "MAX_COMBO_TOTAL",
    "MAX_SET_SIZE",
    # actions
    "ActionType",
    "Action",
    "PlayAction",
    "YieldAction",
    "DiscardAction",
    "JokerAction",
    "ActionGenerator",
    "choose",
    # config
    "JokerPolicy",
    "GameConfig",
    "HAND_SIZES",
    # state
    "Phase",
    "EventType",
    "Event",
    "RejectReason",
    "Accepted",
    "Rejected",
    "ActionResult",
    "Enemy",
    "GameSnapshot",
    # engine
    "RegicideGame",
    # ai
    "HeuristicWeights",
    "RegicideAI",
]
