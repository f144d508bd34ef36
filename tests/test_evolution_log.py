from neuro_evo.sim.evolution_log import EvolutionLog
from neuro_evo.sim.genetics import GeneticAlgorithm
from neuro_evo.sim.traits import generate_traits


def _pop(factory, n_pred=4, n_prey=16):
    pop = []
    for i in range(n_pred + n_prey):
        c = factory(i < n_pred, generate_traits(i < n_pred))
        c.fitness = float(i)
        pop.append(c)
    return pop


def test_entries_are_newest_first_and_bounded(factory):
    log = EvolutionLog(max_entries=5)
    c = factory(False, generate_traits())
    for age in range(8):
        c.age = age
        log.log_death(c)
    ages = [e["age"] for e in log.get_entries()]
    assert ages == [7, 6, 5, 4, 3]


def test_generation_summaries_are_bounded():
    log = EvolutionLog(max_summaries=3)
    for g in range(1, 6):
        log.log_generation(g, dict(avg_fitness=g, max_fitness=2 * g, predators=1, prey=2,
                                   total_kills=0, deaths=4))
    assert [s["generation"] for s in log.generation_summaries] == [3, 4, 5]
    assert log.generation_summaries[-1]["total_deaths"] == 4


def test_kind_filter_and_limit(factory):
    log = EvolutionLog()
    pred = factory(True, generate_traits(True))
    prey = factory(False, generate_traits())
    for _ in range(3):
        log.log_kill(pred, prey)
        log.log_death(prey, "hunted")
    assert len(log.get_entries("kill")) == 3
    assert len(log.get_entries("death", limit=2)) == 2
    assert log.get_entries("death")[0]["cause"] == "hunted"


def test_survivor_summary_after_evolve(factory):
    log = EvolutionLog()
    pop = _pop(factory)
    log.log_generation(1, dict(avg_fitness=9.5, max_fitness=19.0, predators=4, prey=16))
    GeneticAlgorithm().evolve(pop, factory, logger=log, generation=2)

    summary = log.survivor_summary()
    assert summary["generation"] == 1
    assert summary["elite_count"] == 4
    assert summary["offspring_count"] == 16
    assert [e["rank"] for e in summary["elites"]] == [1, 2, 3, 4]
    assert set(summary["trait_averages"]) == {"size", "metabolism", "aggression", "vision"}


def test_survivor_summary_needs_a_generation():
    assert EvolutionLog().survivor_summary() is None


def test_formatted_entries(factory):
    log = EvolutionLog()
    pred = factory(True, generate_traits(True))
    prey = factory(False, generate_traits())
    log.log_kill(pred, prey)
    log.log_death(prey, "hunted")
    lines = log.formatted_entries()
    assert lines[0].endswith("(age 0)")
    assert "was hunted" in lines[0]
    assert lines[1] == f"predator {pred.id} hunted prey {prey.id}"


def test_clear(factory):
    log = EvolutionLog()
    log.log_death(factory(False, generate_traits()))
    log.clear()
    assert log.get_entries() == []
