"""
Tests for the command-line runner and SimConfig.
"""

import os

import pytest
from config import SimConfig, NUM_SENSORS, NUM_ACTIONS
from main import parse_args, config_from_args, main


class TestSimConfig:

    def test_defaults_validate(self):
        cfg = SimConfig().validate()
        assert cfg.n_inputs == NUM_SENSORS == 18
        assert cfg.n_outputs == NUM_ACTIONS == 9
        assert cfg.genome_length == 18 * 12 + 12 + 12 * 9 + 9

    @pytest.mark.parametrize("field,value", [
        ("ant_count", 0),
        ("world_height", -1),
        ("steps_per_gen", 0),
        ("elite_count", 0),
        ("n_inputs", 17),
        ("n_outputs", 10),
        ("mutation_rate", 1.5),
        ("pheromone_decay", -0.1),
        ("max_health", 0.0),
    ])
    def test_invalid(self, field, value):
        with pytest.raises(ValueError):
            SimConfig(**{field: value}).validate()

    def test_to_dict(self):
        data = SimConfig(ant_count=7).to_dict()
        assert data["ant_count"] == 7
        assert "genome_length" not in data


class TestArgs:

    def test_flags_map_onto_config(self):
        args = parse_args(["--ants", "9", "--steps", "50", "--elite", "2",
                           "--size", "16", "12", "20", "--hidden", "4",
                           "--decay", "0.1"])
        cfg = config_from_args(args)
        assert (cfg.world_width, cfg.world_height, cfg.world_depth) == (16, 12, 20)
        assert cfg.ant_count == 9
        assert cfg.steps_per_gen == 50
        assert cfg.elite_count == 2
        assert cfg.n_hidden == 4
        assert cfg.pheromone_decay == 0.1

    def test_no_mutation(self):
        cfg = config_from_args(parse_args(["--no_mutation"]))
        assert cfg.mutation_rate == 0.0

    def test_bad_values_rejected(self):
        with pytest.raises(ValueError):
            config_from_args(parse_args(["--ants", "0"]))


def test_main_writes_outputs(tmp_path, capsys):
    out = str(tmp_path)
    main(["--gens", "2", "--ants", "3", "--steps", "5",
          "--size", "12", "10", "12", "--ground", "3",
          "--seed", "1", "--outdir", out, "--snapshot_interval", "1"])
    for rel in ("evolution_log.csv",
                os.path.join("charts", "evolution_final.png"),
                os.path.join("snapshots", "gen_000001.png"),
                os.path.join("neural", "gen_000002_queen.png")):
        assert os.path.isfile(os.path.join(out, rel)), rel
    assert "Simulation complete" in capsys.readouterr().out
