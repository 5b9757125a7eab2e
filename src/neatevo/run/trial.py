"""
NEAT Trial Module

A trial drives one evolutionary run end to end: it owns the innovation
registry and the Population, scores every generation with a problem-specific
fitness function (optionally spread over worker processes with joblib),
and decides when the run is over.

Classes:
    Trial: Abstract driver of a single NEAT run
"""

from abc    import ABC, abstractmethod
from joblib import Parallel, delayed

from neatevo.genotype   import Genome, InnovationRegistry
from neatevo.pool       import Checkpoint, Population
from neatevo.run.config import Config

class Trial(ABC):
    """
    Abstract driver of a single NEAT run.

    One call to 'run()' is one generation loop:

        evaluate -> report -> [terminate?] -> evolve -> evaluate -> report -> ...

    Every run starts from a fresh InnovationRegistry and a fresh Population,
    so a Trial object can be run repeatedly. Checkpoints raised by the
    population (a species found a new best genome) are forwarded to
    '_on_checkpoint()', where subclasses can export them.

    Subclasses provide the problem:
        _evaluate_fitness(genome): score one genome (non-negative)
        _report_progress():        called after every evaluated generation
        _final_report():           called once, when the run is over

    and may extend:
        _reset():                  call super()._reset(), then reset own state
        _on_checkpoint(cp):        receive new per-species champions
        _terminate():              replace the stopping rule

    Public Attributes:
        failed: False once the fitness target has been reached

    Public Properties:
        population: The Population of the current (or last) run
        generation: Number of generations evolved in the current run

    Public Methods:
        run(num_jobs): Evolve until the stopping rule fires

    'num_jobs' follows joblib: 1 evaluates in this process, n > 1 uses
    n worker processes and -1 uses one per CPU core.
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        """
        Parameters:
            config:          run parameters; 'max_number_generations' and the
                             TERMINATION keys decide when 'run()' stops
            suppress_output: skip '_report_progress' and '_final_report'
                             (e.g. when many trials run back to back)
        """
        self._config            : Config             = config
        self._suppress_output   : bool               = suppress_output
        self._innovations       : InnovationRegistry = InnovationRegistry()
        self._population        : Population | None  = None
        self._generation_counter: int                = 0
        self.failed             : bool               = True

    @property
    def population(self) -> Population | None:
        return self._population

    @property
    def generation(self) -> int:
        return self._generation_counter

    def run(self, num_jobs: int = 1) -> None:
        """
        Evolve a fresh population until '_terminate()' returns True.

        Parameters:
            num_jobs: worker processes used for fitness evaluation (see class docstring)
        """
        self._reset()

        self._population = Population(self._config, self._innovations)
        self._population.add_checkpoint_listener(self._on_checkpoint)
        self._score_generation(num_jobs)

        while not self._terminate():
            self._population.evolve()
            self._generation_counter += 1
            self._score_generation(num_jobs)

        if not self._suppress_output:
            self._final_report()

    def _score_generation(self, num_jobs: int) -> None:
        """Assign a fitness to every genome of the current generation, then report."""
        if num_jobs == 1:
            self._population.evaluate_fitness(self._evaluate_fitness)
        else:
            genomes = self._population.genomes
            scores  = Parallel(num_jobs)(delayed(self._evaluate_fitness)(genome) for genome in genomes)
            for genome, fitness in zip(genomes, scores):
                genome.fitness = fitness

        if not self._suppress_output:
            self._report_progress()

    @abstractmethod
    def _reset(self):
        """
        Forget the previous run: new innovation registry, generation 0, not yet successful.
        Subclasses extend this to reset their own problem state.
        """
        self._innovations        = InnovationRegistry()
        self._generation_counter = 0
        self.failed              = True

    @abstractmethod
    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Score one genome; higher is better.

        The result must not be negative: it feeds fitness sharing and the
        roulette wheel selection of species and parents.
        When 'num_jobs' is not 1 this runs in a worker process, so it must
        not rely on changes it makes to the trial object.
        """
        pass

    @abstractmethod
    def _report_progress(self):
        """Show the state of the generation just evaluated (skipped when output is suppressed)."""
        pass

    @abstractmethod
    def _final_report(self):
        """Show the outcome of the run (skipped when output is suppressed)."""
        pass

    def _on_checkpoint(self, checkpoint: Checkpoint) -> None:
        """Called whenever a species of the running population finds a new best genome."""
        pass

    def _terminate(self) -> bool:
        """
        Stopping rule applied after every evaluated generation.

        The run stops after 'max_number_generations' generations. With
        'fitness_termination_check' on, it also stops as soon as the best
        ("max") or mean ("mean") raw fitness of the generation reaches
        'fitness_threshold'; reaching it clears 'failed'.

        Raises:
            RuntimeError: if 'fitness_criterion' is neither "max" nor "mean"
        """
        out_of_time = self._generation_counter >= self._config.max_number_generations
        if not self._config.fitness_termination_check:
            return out_of_time

        best, mean = self._population.fitness_statistics()
        measures   = {"max": best, "mean": mean}
        if self._config.fitness_criterion not in measures:
            raise RuntimeError(f"bad 'fitness_criterion' in configuration: '{self._config.fitness_criterion}'")

        if measures[self._config.fitness_criterion] >= self._config.fitness_threshold:
            self.failed = False
            return True
        return out_of_time
