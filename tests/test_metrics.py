import csv

import pandas as pd
import pytest

from neuro_evo.sim.metrics import summarize_generation, append_csv
from neuro_evo.sim.traits import Traits
from neuro_evo.ui.csv_writer import GenerationCsvLogger

import analyze_ui_csv


def _pop(make_creature):
    a = make_creature(is_predator=True, traits=Traits(size=1.2), fitness=30.0)
    a.kills = 2
    b = make_creature(traits=Traits(size=0.8), fitness=10.0)
    b.food_eaten = 3
    c = make_creature(fitness=2.0, energy=0.0)
    return [a, b, c]


def test_summarize_generation(make_creature):
    row = summarize_generation(4, _pop(make_creature))
    assert row["generation"] == 4
    assert (row["n"], row["alive"], row["predators"], row["prey"]) == (3, 2, 1, 2)
    assert (row["alive_predators"], row["alive_prey"]) == (1, 1)
    assert row["avg_fitness"] == pytest.approx(14.0)
    assert (row["max_fitness"], row["min_fitness"]) == (30.0, 2.0)
    assert (row["total_kills"], row["food_eaten"]) == (2, 3)
    assert row["avg_size"] == pytest.approx(1.0)


def test_summarize_empty_generation():
    row = summarize_generation(1, [])
    assert row["n"] == 0
    assert row["avg_fitness"] == 0.0


def test_append_csv_writes_header_once(tmp_path, make_creature):
    path = tmp_path / "out" / "gens.csv"
    pop = _pop(make_creature)
    append_csv(str(path), summarize_generation(1, pop))
    append_csv(str(path), summarize_generation(2, pop))
    rows = list(csv.DictReader(open(path, newline="")))
    assert [r["generation"] for r in rows] == ["1", "2"]


def test_generation_csv_logger(tmp_path, make_creature):
    overall = tmp_path / "runs" / "overall.csv"
    species = tmp_path / "runs" / "species.csv"
    logger = GenerationCsvLogger(str(overall), str(species))
    pop = _pop(make_creature)
    logger.append_generation(1, pop, food_count=60, generation_length=800)
    logger.append_generation(2, pop, food_count=60, generation_length=800, notes="x")

    rows = list(csv.DictReader(open(overall, newline="")))
    assert len(rows) == 2
    assert rows[0]["session_id"] == logger.session_id
    assert rows[0]["predators"] == "1"
    assert float(rows[0]["fitness_max"]) == 30.0
    assert rows[1]["notes"] == "x"

    sp = list(csv.DictReader(open(species, newline="")))
    assert [r["species"] for r in sp] == ["predator", "prey", "predator", "prey"]
    assert sp[1]["n"] == "2"


def test_species_csv_can_be_switched_off(tmp_path, make_creature):
    overall = tmp_path / "overall.csv"
    species = tmp_path / "species.csv"
    logger = GenerationCsvLogger(str(overall), str(species), enable_species=False)
    logger.append_generation(1, _pop(make_creature), food_count=60, generation_length=800)
    assert overall.exists()
    assert not species.exists()

    logger.enable_species = True
    logger.append_generation(2, _pop(make_creature), food_count=60, generation_length=800)
    assert len(list(csv.DictReader(open(species, newline="")))) == 2


def test_analysis_cleans_and_plots(tmp_path, make_creature):
    overall = tmp_path / "overall.csv"
    species = tmp_path / "species.csv"
    logger = GenerationCsvLogger(str(overall), str(species))
    for g in range(1, 4):
        logger.append_generation(g, _pop(make_creature), food_count=60, generation_length=800)

    df = analyze_ui_csv.clean_overall(pd.read_csv(overall))
    assert df["generation"].tolist() == [1, 2, 3]
    assert analyze_ui_csv.latest_session_id(pd.read_csv(overall)) == logger.session_id

    png = analyze_ui_csv.plot_overall(df, str(tmp_path / "reports"), tag="t")
    assert png.endswith(".png")
    sp = analyze_ui_csv.clean_species(pd.read_csv(species))
    assert len(analyze_ui_csv.plot_species(sp, str(tmp_path / "reports"), tag="t")) == 2
