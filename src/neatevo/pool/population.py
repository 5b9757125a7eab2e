"""
NEAT Population Module

This module implements the Population class, the top-level orchestrator for the NEAT
evolutionary algorithm. The population manages the complete lifecycle of evolution,
from initialization through convergence.

Classes:
    Checkpoint:      Notification carrying a new per-species champion
    GenerationStats: Summary of one generation
    Population:      Top-level evolutionary coordinator managing genomes and generations
"""

import logging
import numpy as np
import random
from typing    import TYPE_CHECKING, Callable, NamedTuple

from neatevo.genotype import Breeder, Genome, InnovationRegistry, Mutator
from neatevo.pool.species import Species
if TYPE_CHECKING:
    from neatevo.run.config import Config

logger = logging.getLogger(__name__)

class Checkpoint(NamedTuple):
    """A species produced a new best genome (fitness is the shared fitness)."""
    genome    : Genome
    generation: int
    species_id: int
    fitness   : float

class GenerationStats(NamedTuple):
    """Raw (unshared) fitness statistics and controller state after one generation."""
    generation                : int
    best_fitness              : float
    mean_fitness              : float
    num_species               : int
    compatibility_threshold   : float
    add_connection_probability: float
    add_node_probability      : float

class Population:
    """
    A population of evolving genomes in the NEAT algorithm.

    The Population class represents the top-level container for the evolutionary
    process. It owns the genomes of the current generation, the species they are
    divided into, and the scalar state that adapts while evolution progresses:
    the compatibility threshold and the structural mutation probabilities.

    A generation is run in two steps, both driven by the caller:
     1. the fitness of every genome is evaluated (see 'evaluate_fitness')
     2. 'evolve()' turns the evaluated generation into the next one

    All random decisions are taken with the random number generator given at
    construction (or one seeded with 'config.seed'), so runs are reproducible.

    Public Attributes:
        genomes:                    List of all Genome objects in the current generation
        species:                    List of the current species
        compatibility_threshold:    Current speciation threshold
        add_connection_probability: Current probability of a connection mutation
        add_node_probability:       Current probability of a node mutation
        last_best_fitness:          Best shared fitness of the previous generation
        all_time_best_fitness:      Best raw fitness ever seen
        champion:                   Snapshot of the genome with the best raw fitness ever seen
        generation_counter:         Number of generations evolved so far
        history:                    List of GenerationStats, one per evolved generation

    Public Methods:
        evaluate_fitness(fitness_fn):      Assign fitness_fn(genome) to every genome
        evolve():                          Create the next generation
        get_fittest_genome():              Return the genome with highest fitness
        fitness_statistics():              Return the best and mean fitness of the generation
        inject(genome, index):             Replace a genome with a copy of an external one
        add_checkpoint_listener(callback): Be notified of new per-species champions
    """

    def __init__(self,
                 config     : 'Config',
                 innovations: InnovationRegistry | None = None,
                 rng        : random.Random | None = None):
        """
        Initialize the population with minimal genomes, each with a few random connections.

        Parameters:
            config:      stores configuration parameters
            innovations: registry numbering new connections; a private one is created if None
            rng:         random number generator; one seeded with 'config.seed' is created if None
        """
        self._config      = config
        self._innovations = innovations if innovations is not None else InnovationRegistry()
        self._rng         = rng if rng is not None else random.Random(config.seed)

        self._next_species_id = 1
        self._listeners: list[Callable[[Checkpoint], None]] = []

        self.species: list[Species] = []

        self.compatibility_threshold   : float = config.compatibility_threshold
        self.add_connection_probability: float = config.connection_add_probability
        self.add_node_probability      : float = config.node_add_probability

        self.last_best_fitness    : float         = 0.0
        self.all_time_best_fitness: float         = -np.inf
        self.champion             : Genome | None = None
        self._stagnation_counter  : int           = 0
        self.generation_counter   : int           = 0
        self.history: list[GenerationStats] = []

        self.genomes: list[Genome] = [self._create_genome() for _ in range(config.population_size)]

    @property
    def innovations(self) -> InnovationRegistry:
        return self._innovations

    def _create_genome(self) -> Genome:
        """
        Create a minimal genome, then attempt a few connection
        mutations and mutate the weights once.
        """
        genome = Genome.create_minimal(self._config.num_inputs, self._config.num_outputs, self._innovations)
        for _ in range(self._config.initial_connections):
            Mutator.add_connection(genome, self._config.connection_add_attempts, self._rng)
        self._mutate_weights(genome)
        return genome

    def _mutate_weights(self, genome: Genome) -> None:
        Mutator.mutate_weights(genome,
                               self._config.weight_perturb_prob,
                               self._config.weight_perturb_strength,
                               self._rng)

    def add_checkpoint_listener(self, callback: Callable[[Checkpoint], None]) -> None:
        """
        Register a function to be called with a Checkpoint whenever
        a species produces a new best genome.
        """
        self._listeners.append(callback)

    def evaluate_fitness(self, fitness_fn: Callable[[Genome], float]) -> None:
        """
        Evaluate the fitness of every genome, sequentially.

        Parameters:
            fitness_fn: function mapping a genome to its (non-negative) fitness
        """
        for genome in self.genomes:
            genome.fitness = fitness_fn(genome)

    def get_fittest_genome(self) -> Genome | None:
        """
        Find and return the genome with the highest fitness in the current generation.

        Returns:
            The genome with the highest fitness value, or None if the population is empty
        """
        if not self.genomes:
            return None
        return max(self.genomes, key=lambda genome: genome.fitness)

    def fitness_statistics(self) -> tuple[float, float]:
        """
        Best and mean raw fitness of the current, evaluated, generation.
        Both are 0.0 for an empty population.
        """
        fitness = [genome.fitness for genome in self.genomes]
        if not fitness:
            return 0.0, 0.0
        return max(fitness), float(np.mean(fitness))

    def inject(self, genome: Genome, index: int = 0) -> None:
        """
        Replace a genome of the current generation with a copy of an external genome
        (for example, a known good solution loaded from a durable record).

        The copy is attached to the registry of this population, which is moved
        past the innovation numbers the copy carries so they are never handed out again.

        Parameters:
            genome: the genome to copy into the population
            index:  position of the genome to be replaced
        """
        copy = Genome.from_dict(genome.to_dict(), self._innovations)
        copy.fitness = genome.fitness
        self.genomes[index] = copy

    def evolve(self) -> None:
        """
        Create the next generation from the current, evaluated, one.

        The generation process follows these steps:

        Step 1: Speciation
        - Reset every species (new representative, no members)
        - Place each genome into the first species that accepts it, or found a new one
        - Remove species left without members

        Step 2: Fitness sharing
        - Divide the fitness of each genome by the size of its species

        Step 3: Compatibility threshold adjustment
        - Steer the number of species towards the target species count

        Step 4: Stagnation removal
        - Notify checkpoint listeners of new per-species champions
        - Remove species which have not improved for too long

        Step 5: Sorting
        - Sort the members of each species, fittest first

        Step 6: Mutation rate adjustment
        - Increase structural mutation rates while the best shared fitness stagnates,
          decrease them when it improves

        Step 7: Reproduction
        - The fittest genome of each species survives unchanged (elitism)
        - The rest of the generation is bred through crossover and mutation
        """
        # Raw fitness statistics, before sharing modifies the fitness of each genome
        best_fitness, mean_fitness = self.fitness_statistics()
        self._track_champion()

        self._speciate()
        self._share_fitness()
        shared_best = max((genome.fitness for genome in self.genomes), default=0.0)
        self._adjust_compatibility_threshold()
        self._cull_stagnant_species()
        self._sort_species_members()
        self._adjust_mutation_rates(shared_best)

        stats = GenerationStats(self.generation_counter,
                                best_fitness,
                                mean_fitness,
                                len(self.species),
                                self.compatibility_threshold,
                                self.add_connection_probability,
                                self.add_node_probability)
        self.history.append(stats)
        logger.info("Generation %d: best=%.4f mean=%.4f species=%d threshold=%.2f p_conn=%.2f p_node=%.2f",
                    *stats)

        self.genomes = self._breed_next_generation()
        self.generation_counter += 1

    def _track_champion(self) -> None:
        fittest = self.get_fittest_genome()
        if fittest is not None and fittest.fitness > self.all_time_best_fitness:
            self.all_time_best_fitness = fittest.fitness
            self.champion              = fittest.clone()
            self.champion.fitness      = fittest.fitness

    def _speciate(self) -> None:
        """
        Split the current generation into species.
        Genomes are placed into the first compatible species, in existing order.
        """
        for s in self.species:
            s.reset_for_next_gen(self._rng)

        c1 = self._config.distance_excess_coeff
        c2 = self._config.distance_disjoint_coeff
        c3 = self._config.distance_weight_coeff

        for genome in self.genomes:
            placed = any(s.try_add(genome, self.compatibility_threshold, c1, c2, c3) for s in self.species)
            if not placed:
                self.species.append(Species(self._next_species_id, genome))
                self._next_species_id += 1

        self.species = [s for s in self.species if s.members]

    def _share_fitness(self) -> None:
        """
        Explicit fitness sharing: divide the fitness of each genome by
        the number of members of its species.
        """
        for s in self.species:
            size = len(s.members)
            for genome in s.members:
                genome.fitness /= size

    def _adjust_compatibility_threshold(self) -> None:
        target = self._config.target_species_count
        step   = self._config.compatibility_threshold_step

        if len(self.species) < target:
            self.compatibility_threshold -= step
        elif len(self.species) > target:
            self.compatibility_threshold += step

        self.compatibility_threshold = float(np.clip(self.compatibility_threshold,
                                                     self._config.compatibility_threshold_min,
                                                     self._config.compatibility_threshold_max))

    def _cull_stagnant_species(self) -> None:
        """
        Update the stagnation counters of all species, and remove the stagnant ones.
        A species which improves its best (shared) fitness first produces a checkpoint.
        """
        surviving = []
        for s in self.species:
            top  = max(s.members, key=lambda genome: genome.fitness)
            best = top.fitness

            if best > s.best_fitness:
                self._save_checkpoint(top, s.id, best)

            s.update_stagnation(best)

            if s.is_stagnant(self._config.max_stagnation_period):
                logger.debug("Removing stagnant species %d (best fitness %.4f, %d members)",
                             s.id, s.best_fitness, len(s.members))
            else:
                surviving.append(s)

        self.species = surviving

    def _save_checkpoint(self, genome: Genome, species_id: int, fitness: float) -> None:
        snapshot = genome.clone()
        snapshot.fitness = fitness
        checkpoint = Checkpoint(snapshot, self.generation_counter, species_id, fitness)

        logger.info("New champion of species %d in generation %d: fitness %.4f",
                    species_id, self.generation_counter, fitness)
        for callback in self._listeners:
            callback(checkpoint)

    def _sort_species_members(self) -> None:
        for s in self.species:
            s.sort_members()

    def _adjust_mutation_rates(self, current_best: float) -> None:
        """
        Adapt the structural mutation probabilities to the progress of the best fitness.

        Parameters:
            current_best: best shared fitness of the current generation
        """
        cfg = self._config

        if current_best - self.last_best_fitness < cfg.improvement_epsilon:
            self._stagnation_counter += 1
            if self._stagnation_counter >= cfg.stagnation_generations:
                self.add_connection_probability += cfg.connection_add_increase
                self.add_node_probability       += cfg.node_add_increase
                self._stagnation_counter = 0
        else:
            self.add_connection_probability -= cfg.connection_add_decrease
            self.add_node_probability       -= cfg.node_add_decrease
            self._stagnation_counter = 0

        self.add_connection_probability = float(np.clip(self.add_connection_probability,
                                                        cfg.connection_add_probability_min,
                                                        cfg.connection_add_probability_max))
        self.add_node_probability = float(np.clip(self.add_node_probability,
                                                  cfg.node_add_probability_min,
                                                  cfg.node_add_probability_max))
        self.last_best_fitness = current_best

    def _select_species(self, total_fitness: float) -> Species:
        """Roulette wheel selection of a species, proportional to its total (shared) fitness."""
        pick       = self._rng.random() * total_fitness
        cumulative = 0.0
        for s in self.species:
            cumulative += s.total_fitness
            if cumulative >= pick:
                return s
        return self.species[0]

    def _breed_next_generation(self) -> list[Genome]:
        """
        Breed the next generation from the surviving species.

        Returns:
            exactly 'population_size' genomes
        """
        size     = self._config.population_size
        next_gen = []

        # Elitism: the top genome of each species survives unchanged
        for s in self.species[:size]:
            next_gen.append(s.top_member.clone())

        total_fitness = sum(s.total_fitness for s in self.species)
        while len(next_gen) < size and self.species:
            chosen = self._select_species(total_fitness)

            pool_fitness = chosen.total_fitness
            parent1 = Breeder.select_parent(chosen.members, pool_fitness, self._rng)
            parent2 = Breeder.select_parent(chosen.members, pool_fitness, self._rng)
            child   = Breeder.crossover(parent1, parent2, self._rng)

            self._mutate_weights(child)
            if self._rng.random() < self.add_connection_probability:
                Mutator.add_connection(child, self._config.connection_add_attempts, self._rng)
            if self._rng.random() < self.add_node_probability:
                Mutator.add_node(child, self._rng)

            next_gen.append(child)

        # Pad with copies of random genomes of the previous generation
        missing = size - len(next_gen)
        if missing > 0:
            logger.debug("Padding generation %d with %d genomes", self.generation_counter + 1, missing)
            for _ in range(missing):
                if self.genomes:
                    next_gen.append(self._rng.choice(self.genomes).clone())
                else:
                    next_gen.append(self._create_genome())

        return next_gen

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
