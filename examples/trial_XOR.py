"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. The XOR problem is a fundamental test case in neural
network research, demonstrating the necessity of hidden layers for solving
non-linearly separable problems.

The XOR Problem:
    XOR is a two-input, one-output boolean function where the output is True
    only when the inputs differ:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = max(0, 4.0 - Σ(output - target)²)

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.
    Since the output node applies 'tanh', its value lies in (-1, 1); the fitness is
    floored at zero because selection requires non-negative fitness values.

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    config = Config("configs/config_xor.ini")
    trial = Trial_XOR(config)
    trial.run(num_jobs=1)
"""

import logging
import numpy as np
from pathlib import Path

from neatevo.genotype  import Genome
from neatevo.phenotype import NetworkEvaluator
from neatevo.run       import Config, Trial

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    All four XOR cases are evaluated in a single batched pass through the network.

    Implemented Methods:
        _evaluate_fitness(genome): Test network on all 4 XOR cases
        _report_progress():        Display generation statistics and XOR truth table
        _final_report():           Display the evolved network and its durable record
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        super().__init__(config, suppress_output)

        # shape: (4, 2) for inputs, (4, 1) for outputs
        self.xor_inputs  = np.array([[0.0, 0.0],
                                     [0.0, 1.0],
                                     [1.0, 0.0],
                                     [1.0, 1.0]])
        self.xor_outputs = np.array([[0.0],
                                     [1.0],
                                     [1.0],
                                     [0.0]])

    def _reset(self):
        """Reset trial state."""
        return super()._reset()

    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Evaluate genome fitness by testing on XOR inputs.

        Parameters:
            genome: The genome to evaluate

        Returns:
            Fitness score (maximum 4.0 for perfect XOR solution)
        """
        network = NetworkEvaluator(genome, self._config.bias_value)
        outputs = network.evaluate_batch(self.xor_inputs)
        errors  = outputs - self.xor_outputs
        return max(0.0, 4.0 - float(np.sum(errors ** 2)))

    def _report_progress(self):
        """
        Print a report describing the current generation.
        """
        fittest = self._population.get_fittest_genome()
        network = NetworkEvaluator(fittest, self._config.bias_value)

        s  = f"===============\n"
        s += f"GENERATION {self._generation_counter:04d}\n"
        s += f"population size = {len(self._population.genomes)}\n"
        s += f"number species  = {len(self._population.species)}\n"
        s += f"threshold       = {self._population.compatibility_threshold:.2f}\n"
        s += f"maximum fitness = {fittest.fitness:.4f}\n"
        s += '\n'

        s += "input         output   target  error\n"
        s += "------------------------------------\n"
        outputs = network.evaluate_batch(self.xor_inputs)
        for inputs, output, target in zip(self.xor_inputs, outputs[:, 0], self.xor_outputs[:, 0]):
            s += f"{inputs.tolist()} -> {output:+.4f}   {target}   {abs(output - target):.4f}\n"

        print(s)

    def _final_report(self):
        """
        Display the fittest network found, and its durable (JSON) representation.
        """
        fittest = self._population.get_fittest_genome()
        network = NetworkEvaluator(fittest, self._config.bias_value)

        print("SUCCESS" if not self.failed else "FAILED")
        print(repr(network))
        print(network)
        print(fittest.to_json())

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(asctime)s: %(message)s")

    config = Config(str(Path(__file__).parent / "configs" / "config_xor.ini"))
    trial  = Trial_XOR(config)
    trial.run(num_jobs=1)
