"""
规则配置

每条可选规则一个开关，未指定的开关默认关闭
每局游戏提供一次，之后不再修改
"""
from dataclasses import dataclass, fields, asdict, replace
from pathlib import Path
from typing import Dict, FrozenSet, Union
import json
import logging
import re

from .cards import Rank
from .plays import ClassifyOptions, PlayType

logger = logging.getLogger(__name__)

# 禁止上がり: 不能用这些牌出完
FORBIDDEN_FINISH_RANKS: FrozenSet[Rank] = frozenset({
    Rank.JACK, Rank.TWO, Rank.EIGHT, Rank.JOKER,
})

_CAMEL_RE = re.compile(r'(?<=[a-z0-9])([A-Z])')
_DIGIT_RE = re.compile(r'(?<=[a-zA-Z])(?=\d)')


def _snake_case(key: str) -> str:
    """galaxyExpress999 -> galaxy_express_999"""
    return _DIGIT_RE.sub('_', _CAMEL_RE.sub(r'_\1', key)).lower()


@dataclass(frozen=True)
class RuleSettings:
    """
    本地规则开关

    增加一条规则 = 增加一个字段 + 一个判定
    """
    # 牌型
    stairs: bool = False               # 阶梯
    skip_stair: bool = False           # 跳阶梯
    double_stair: bool = False         # 二列阶梯
    tunnel: bool = False               # 隧道
    spade_stair: bool = False          # 黑桃阶梯
    taepodong: bool = False            # 大浦洞
    emperor: bool = False              # 皇帝
    cross_dressing: bool = False       # 女装
    southern_cross: bool = False       # 3396
    heiankyo_flow: bool = False        # 794
    cyclone: bool = False              # 3196
    konagona_revolution: bool = False  # 5757
    yoroshiku_revolution: bool = False  # 4649

    # 强度规则
    ten_free: bool = False
    trump: bool = False
    fusion_revolution: bool = False
    tsui_kaku: bool = False
    sandstorm: bool = False
    spade_three_return: bool = False
    double_king: bool = False
    arthur: bool = False
    red_seven_power: bool = False
    black_seven_power: bool = False
    down_number: bool = False

    # 限制
    suit_lock: bool = False
    number_lock: bool = False
    strict_lock: bool = False
    color_lock: bool = False
    partial_lock: bool = False
    five_color_lock: bool = False
    even_restriction: bool = False
    odd_restriction: bool = False
    double_digit_seal: bool = False
    hot_milk: bool = False
    queen_release: bool = False

    # 出完限制
    forbidden_finish: bool = False
    adauchi_ban: bool = False
    security_law: bool = False

    # 革命类
    great_revolution: bool = False
    religious_revolution: bool = False
    stair_revolution: bool = False
    skip_stair_revolution: bool = False
    nanasan_revolution: bool = False
    joker_revolution: bool = False
    coup: bool = False
    omen: bool = False

    # 强弱反转
    two_back: bool = False
    six_return: bool = False
    enhanced_j_back: bool = False

    # 清场
    eight_cut: bool = False
    enhanced_eight_cut: bool = False
    five_cut: bool = False
    six_cut: bool = False
    seven_cut: bool = False
    ambulance: bool = False
    rokurokubi: bool = False
    dignity: bool = False
    four_stop: bool = False
    ten_counter: bool = False
    assassination: bool = False
    triple_three_return: bool = False
    spade_two_return: bool = False

    # 回合/手牌副作用
    five_skip: bool = False
    freemason: bool = False
    ten_skip: bool = False
    seven_pass: bool = False
    seven_attach: bool = False
    nine_return: bool = False
    ten_discard: bool = False
    nine_reverse: bool = False
    nine_quick: bool = False
    queen_reverse: bool = False
    king_reverse: bool = False
    queen_bomber: bool = False
    lucky_seven: bool = False
    kings_march: bool = False
    zombie: bool = False
    satan: bool = False
    chestnut_picking: bool = False
    galaxy_express_999: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> 'RuleSettings':
        """
        从字典创建 (接受 camelCase 键，忽略未知键)

        Args:
            d: 规则名 -> 开关

        Returns:
            RuleSettings
        """
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {}
        for key, value in d.items():
            name = _snake_case(key)
            if name not in valid_keys:
                logger.debug(f"Ignoring unknown rule toggle: {key}")
                continue
            filtered[name] = bool(value)
        return cls(**filtered)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'RuleSettings':
        """从 JSON 文件加载"""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Rule settings file must contain a JSON object: {path}")
        return cls.from_dict(data)

    @classmethod
    def all_enabled(cls) -> 'RuleSettings':
        """全部规则开启"""
        return cls(**{f.name: True for f in fields(cls)})

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)

    def with_rules(self, **toggles: bool) -> 'RuleSettings':
        """返回修改了部分开关的副本"""
        return replace(self, **toggles)

    def classify_options(self) -> ClassifyOptions:
        """牌型分类器开关"""
        return ClassifyOptions(
            skip_stair=self.skip_stair,
            double_stair=self.double_stair,
            tunnel=self.tunnel,
            spade_stair=self.spade_stair,
            taepodong=self.taepodong,
        )

    def special_play_types(self) -> FrozenSet[PlayType]:
        """已启用的固定组合"""
        enabled = {
            PlayType.CROSS_DRESSING: self.cross_dressing,
            PlayType.SOUTHERN_CROSS: self.southern_cross,
            PlayType.HEIANKYO_FLOW: self.heiankyo_flow,
            PlayType.CYCLONE: self.cyclone,
            PlayType.KONAGONA: self.konagona_revolution,
            PlayType.YOROSHIKU: self.yoroshiku_revolution,
        }
        return frozenset(t for t, on in enabled.items() if on)
