"""Tests for configuration loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from canvaspal.config import (
    AppConfig,
    RankingConfig,
    ScoringConfig,
    UrgencyBand,
    WeightConfig,
    load_config,
)


class TestDefaults:
    def test_default_weights(self):
        cfg = AppConfig.default()
        assert cfg.weights == WeightConfig(due_date=0.4, grade_weight=0.3, impact=0.3)

    def test_default_scoring(self):
        cfg = ScoringConfig()
        assert cfg.due_window_days == 10.0
        assert cfg.default_grade_weight_factor == 0.4
        assert cfg.default_impact_factor == 0.5
        assert cfg.excellence_cutoff == 90.0
        assert cfg.peer_normalization is True
        assert cfg.type_weights["quiz"] == 1.2
        assert [b.within_hours for b in cfg.urgency_bands] == [24, 72, 168]

    def test_default_instances_do_not_share_state(self):
        a = ScoringConfig()
        b = ScoringConfig()
        a.type_weights["quiz"] = 5.0
        assert b.type_weights["quiz"] == 1.2

    def test_from_empty_dict(self):
        cfg = AppConfig.from_dict({})
        assert cfg.scoring.urgency_bands == ScoringConfig().urgency_bands
        assert cfg.ranking.default_level == "all"


class TestFromDict:
    def test_partial_weights(self):
        cfg = WeightConfig.from_dict({"due_date": 2})
        assert cfg.due_date == 2.0
        assert cfg.impact == 0.3

    def test_non_numeric_weight_rejected(self):
        with pytest.raises(ValueError, match="impact"):
            WeightConfig.from_dict({"impact": "lots"})

    def test_bands_sorted(self):
        cfg = ScoringConfig.from_dict({
            "urgency_bands": [
                {"within_hours": 72, "bonus": 0.2},
                {"within_hours": 12, "bonus": 0.4},
            ],
        })
        assert cfg.urgency_bands == [
            UrgencyBand(within_hours=12, bonus=0.4),
            UrgencyBand(within_hours=72, bonus=0.2),
        ]

    def test_incomplete_band_rejected(self):
        with pytest.raises(ValueError):
            ScoringConfig.from_dict({"urgency_bands": [{"within_hours": 24}]})

    def test_type_weights_lowercased(self):
        cfg = ScoringConfig.from_dict({"type_weights": {"Quiz": 2}})
        assert cfg.type_weights == {"quiz": 2.0}

    def test_non_positive_window_rejected(self):
        with pytest.raises(ValueError):
            ScoringConfig(due_window_days=0)

    def test_bad_default_level_rejected(self):
        with pytest.raises(ValueError, match="default_level"):
            RankingConfig.from_dict({"default_level": "urgent"})


class TestFromYaml:
    def test_load_file(self, tmp_config_file):
        cfg = AppConfig.from_yaml(tmp_config_file)
        assert cfg.weights == WeightConfig(due_date=3, grade_weight=3, impact=4)
        assert cfg.scoring.due_window_days == 14
        assert cfg.scoring.excellence_cutoff is None
        assert cfg.scoring.urgency_bands[0].within_hours == 24
        assert cfg.ranking.include_completed is True
        assert cfg.ranking.default_level == "high"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(tmp_path / "nope.yaml")

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        cfg_file = tmp_path / "empty.yaml"
        cfg_file.write_text("")
        assert AppConfig.from_yaml(cfg_file) == AppConfig.default()

    def test_env_var_expansion(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CANVASPAL_DUE_WEIGHT", "0.6")
        cfg_file = tmp_path / "env.yaml"
        cfg_file.write_text(textwrap.dedent("""\
            weights:
              due_date: "${CANVASPAL_DUE_WEIGHT}"
        """))
        assert AppConfig.from_yaml(cfg_file).weights.due_date == 0.6

    def test_env_var_booleans(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CANVASPAL_PEER_NORM", "false")
        monkeypatch.setenv("CANVASPAL_SHOW_DONE", "yes")
        cfg_file = tmp_path / "env.yaml"
        cfg_file.write_text(textwrap.dedent("""\
            scoring:
              peer_normalization: "${CANVASPAL_PEER_NORM}"
            ranking:
              include_completed: "${CANVASPAL_SHOW_DONE}"
        """))
        cfg = AppConfig.from_yaml(cfg_file)
        assert cfg.scoring.peer_normalization is False
        assert cfg.ranking.include_completed is True

    def test_unrecognized_boolean_rejected(self):
        with pytest.raises(ValueError, match="include_completed"):
            RankingConfig.from_dict({"include_completed": "sometimes"})

    def test_unset_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("CANVASPAL_UNSET_VAR", raising=False)
        cfg_file = tmp_path / "env.yaml"
        cfg_file.write_text('weights:\n  impact: "${CANVASPAL_UNSET_VAR}"\n')
        with pytest.raises(ValueError, match="CANVASPAL_UNSET_VAR"):
            AppConfig.from_yaml(cfg_file)

    def test_non_mapping_rejected(self, tmp_path: Path):
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            AppConfig.from_yaml(cfg_file)


class TestLoadConfig:
    def test_explicit_path(self, tmp_config_file):
        assert load_config(tmp_config_file).scoring.due_window_days == 14

    def test_env_path(self, tmp_config_file, monkeypatch):
        monkeypatch.setenv("CANVASPAL_CONFIG", str(tmp_config_file))
        assert load_config().ranking.default_level == "high"

    def test_local_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("CANVASPAL_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "canvaspal.yaml").write_text("weights:\n  impact: 0.9\n")
        assert load_config().weights.impact == 0.9

    def test_defaults_when_nothing_found(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("CANVASPAL_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config() == AppConfig.default()
