"""规则配置测试"""
import json
from dataclasses import fields

import pytest

from daifugo.cards import Rank
from daifugo.plays import PlayType
from daifugo.settings import RuleSettings, FORBIDDEN_FINISH_RANKS, _snake_case


class TestDefaults:
    """默认值测试"""

    def test_all_disabled(self):
        settings = RuleSettings()
        assert not any(getattr(settings, f.name) for f in fields(settings))

    def test_all_enabled(self):
        settings = RuleSettings.all_enabled()
        assert all(getattr(settings, f.name) for f in fields(settings))

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RuleSettings().stairs = True

    def test_forbidden_finish_ranks(self):
        assert FORBIDDEN_FINISH_RANKS == {Rank.JACK, Rank.TWO, Rank.EIGHT, Rank.JOKER}


class TestFromDict:
    """from_dict 测试"""

    def test_snake_case(self):
        assert _snake_case("eightCut") == "eight_cut"
        assert _snake_case("galaxyExpress999") == "galaxy_express_999"
        assert _snake_case("eight_cut") == "eight_cut"

    def test_camel_case_keys(self):
        settings = RuleSettings.from_dict({"eightCut": True, "spadeThreeReturn": True})
        assert settings.eight_cut
        assert settings.spade_three_return
        assert not settings.stairs

    def test_unknown_keys_ignored(self):
        settings = RuleSettings.from_dict({"stairs": True, "noSuchRule": True})
        assert settings.stairs

    def test_from_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"sandstorm": True, "galaxyExpress999": True}), encoding="utf-8")
        settings = RuleSettings.from_json(path)
        assert settings.sandstorm
        assert settings.galaxy_express_999

    def test_from_json_rejects_non_object(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            RuleSettings.from_json(path)

    def test_to_dict_round_trip(self):
        settings = RuleSettings(stairs=True, trump=True)
        assert RuleSettings.from_dict(settings.to_dict()) == settings


class TestDerived:
    """派生配置测试"""

    def test_with_rules(self):
        base = RuleSettings()
        changed = base.with_rules(stairs=True)
        assert changed.stairs
        assert not base.stairs

    def test_classify_options(self):
        options = RuleSettings(skip_stair=True, tunnel=True).classify_options()
        assert options.skip_stair
        assert options.tunnel
        assert not options.double_stair

    def test_special_play_types(self):
        types = RuleSettings(cross_dressing=True, konagona_revolution=True).special_play_types()
        assert types == {PlayType.CROSS_DRESSING, PlayType.KONAGONA}
