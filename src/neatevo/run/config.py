import configparser
import os

class Config:

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding default values,
                         for programmatic setup and testing.
        """

        # Default config for testing/manual setup
        if config_file is None:

            # Set defaults for population initialization
            self.population_size     = 150
            self.num_inputs          = 2
            self.num_outputs         = 1
            self.initial_connections = 2
            self.seed                = None

            # Set defaults for speciation
            self.compatibility_threshold      = 3.0
            self.compatibility_threshold_min  = 1.5
            self.compatibility_threshold_max  = 6.0
            self.compatibility_threshold_step = 0.1
            self.target_species_count         = 10
            self.distance_excess_coeff        = 1.0
            self.distance_disjoint_coeff      = 1.0
            self.distance_weight_coeff        = 0.4

            # Set defaults for stagnation
            self.max_stagnation_period = 15

            # Set defaults for weight mutation
            self.weight_perturb_prob     = 0.9
            self.weight_perturb_strength = 0.1

            # Set defaults for structural mutations
            self.connection_add_probability     = 0.5
            self.connection_add_probability_min = 0.2
            self.connection_add_probability_max = 0.8
            self.node_add_probability           = 0.2
            self.node_add_probability_min       = 0.05
            self.node_add_probability_max       = 0.4
            self.connection_add_attempts        = 100

            # Set defaults for mutation rate control
            self.improvement_epsilon     = 0.01
            self.stagnation_generations  = 5
            self.connection_add_increase = 0.05
            self.node_add_increase       = 0.02
            self.connection_add_decrease = 0.03
            self.node_add_decrease       = 0.01

            # Set defaults for network evaluation
            self.bias_value = 1.0

            # Set defaults for termination
            self.fitness_termination_check = False
            self.fitness_criterion         = "max"
            self.fitness_threshold         = None
            self.max_number_generations    = 100

            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION INIT]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION_INIT', 'population_size', int, default=150)

        # The number of input nodes, through which the network receives inputs.
        # A bias node is always added on top of these.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes, to which the network delivers outputs.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # The number of connection mutations attempted on each newly-created
        # genome, before its weights are mutated once.
        self.initial_connections = get_value('POPULATION_INIT', 'initial_connections', int, default=2)

        # Seed of the random number generator driving the evolution.
        # Use "None" for a non-reproducible run.
        self.seed = get_value('POPULATION_INIT', 'seed', int, default=None)

        # [SPECIATION]

        # Genomes whose compatibility distance to the representative of a
        # species does not exceed this threshold are placed into that species.
        # The threshold is adjusted every generation, by one step at a time,
        # so as to steer the number of species towards 'target_species_count'.
        self.compatibility_threshold      = get_value('SPECIATION', 'compatibility_threshold',      float, default=3.0)
        self.compatibility_threshold_min  = get_value('SPECIATION', 'compatibility_threshold_min',  float, default=1.5)
        self.compatibility_threshold_max  = get_value('SPECIATION', 'compatibility_threshold_max',  float, default=6.0)
        self.compatibility_threshold_step = get_value('SPECIATION', 'compatibility_threshold_step', float, default=0.1)
        self.target_species_count         = get_value('SPECIATION', 'target_species_count',         int,   default=10)

        # The coefficient for the excess gene counts'
        # contribution to the compatibility distance.
        self.distance_excess_coeff = get_value('SPECIATION', 'distance_excess_coeff', float, default=1.0)

        # The coefficient for the disjoint gene counts'
        # contribution to the compatibility distance.
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float, default=1.0)

        # The coefficient for the mean weight difference of
        # matching connections' contribution to the compatibility distance.
        self.distance_weight_coeff = get_value('SPECIATION', 'distance_weight_coeff', float, default=0.4)

        # [STAGNATION]

        # Species whose best fitness has not improved for this
        # number of generations are considered stagnant and removed.
        self.max_stagnation_period = get_value('STAGNATION', 'max_stagnation_period', int, default=15)

        # [CONNECTION]

        # The probability that mutation will change the 'weight' of a connection
        # by adding a random value. Otherwise the weight is replaced by a new
        # random value, drawn uniformly from [-1, 1].
        self.weight_perturb_prob = get_value('CONNECTION', 'weight_perturb_prob', float, default=0.9)

        # The largest perturbation (in absolute value) added to a weight.
        self.weight_perturb_strength = get_value('CONNECTION', 'weight_perturb_strength', float, default=0.1)

        # [STRUCTURAL MUTATIONS]

        # The initial probability that mutation will add a connection between
        # existing nodes, and the range within which it is kept while adapting.
        self.connection_add_probability     = get_value('STRUCTURAL_MUTATIONS', 'connection_add_probability',     float, default=0.5)
        self.connection_add_probability_min = get_value('STRUCTURAL_MUTATIONS', 'connection_add_probability_min', float, default=0.2)
        self.connection_add_probability_max = get_value('STRUCTURAL_MUTATIONS', 'connection_add_probability_max', float, default=0.8)

        # The initial probability that mutation will add a new node (splitting an
        # existing connection), and the range within which it is kept while adapting.
        self.node_add_probability     = get_value('STRUCTURAL_MUTATIONS', 'node_add_probability',     float, default=0.2)
        self.node_add_probability_min = get_value('STRUCTURAL_MUTATIONS', 'node_add_probability_min', float, default=0.05)
        self.node_add_probability_max = get_value('STRUCTURAL_MUTATIONS', 'node_add_probability_max', float, default=0.4)

        # The number of random node pairs tried when looking for a new connection.
        self.connection_add_attempts = get_value('STRUCTURAL_MUTATIONS', 'connection_add_attempts', int, default=100)

        # [MUTATION RATE CONTROL]

        # An improvement of the best fitness smaller than this value
        # counts as no improvement at all.
        self.improvement_epsilon = get_value('MUTATION_RATE_CONTROL', 'improvement_epsilon', float, default=0.01)

        # After this many generations without improvement, the structural
        # mutation probabilities are increased.
        self.stagnation_generations = get_value('MUTATION_RATE_CONTROL', 'stagnation_generations', int, default=5)

        # How much the structural mutation probabilities are increased
        # after stagnating, and decreased after improving.
        self.connection_add_increase = get_value('MUTATION_RATE_CONTROL', 'connection_add_increase', float, default=0.05)
        self.node_add_increase       = get_value('MUTATION_RATE_CONTROL', 'node_add_increase',       float, default=0.02)
        self.connection_add_decrease = get_value('MUTATION_RATE_CONTROL', 'connection_add_decrease', float, default=0.03)
        self.node_add_decrease       = get_value('MUTATION_RATE_CONTROL', 'node_add_decrease',       float, default=0.01)

        # [NETWORK]

        # The constant value output by the bias node.
        self.bias_value = get_value('NETWORK', 'bias_value', float, default=1.0)

        # [TERMINATION]

        # Whether to use the fitness of the most recent
        # generation as a criterion for stopping the run.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool, default=False)

        # The function used to compute the termination criterion.
        # Only applicable if 'fitness_termination_check' is 'True'.
        # Allowed values:
        #   "mean" calculate the mean fitness across the entire population
        #   "max"  get the fitness of the fittest genome in the population
        self.fitness_criterion = get_value('TERMINATION', 'fitness_criterion', str, default="max")

        # The fitness value which when met or exceeded causes the run to end.
        # Only applicable if 'fitness_termination_check' is 'True'.
        self.fitness_threshold = get_value('TERMINATION', 'fitness_threshold', float, default=None)

        # The number of generations after which to stop the run.
        # If 'fitness_termination_check' is 'True', the run may stop sooner.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int, default=100)

        self._validate()

    def _validate(self) -> None:
        """
        Check that the values read from the configuration file make sense.

        Raises:
            ValueError: if a value is out of its allowed range
        """
        if self.population_size is None or self.population_size < 1:
            raise ValueError("'population_size' must be a positive integer")
        if self.num_inputs is None or self.num_inputs < 0:
            raise ValueError("'num_inputs' must be a non-negative integer")
        if self.num_outputs is None or self.num_outputs < 1:
            raise ValueError("'num_outputs' must be a positive integer")

        if self.compatibility_threshold_min > self.compatibility_threshold_max:
            raise ValueError("'compatibility_threshold_min' exceeds 'compatibility_threshold_max'")
        if self.connection_add_probability_min > self.connection_add_probability_max:
            raise ValueError("'connection_add_probability_min' exceeds 'connection_add_probability_max'")
        if self.node_add_probability_min > self.node_add_probability_max:
            raise ValueError("'node_add_probability_min' exceeds 'node_add_probability_max'")

        for name in ('weight_perturb_prob',
                     'connection_add_probability',
                     'node_add_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"'{name}' must be a probability, got {value}")

        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ValueError("'fitness_threshold' is required when 'fitness_termination_check' is True")

        if self.fitness_criterion not in ("max", "mean"):
            raise ValueError(f"'fitness_criterion' must be 'max' or 'mean', got '{self.fitness_criterion}'")
