"""Basic simulation example."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from flowsim import DurationRunStrategy, SimulationEngine, SimulationProfile
from flowsim.modeling import QueueingSystem
from flowsim.utils.logger import setup_logger


def main():
    """Run a single M/M/2/10 simulation with a warm-up period."""
    logger = setup_logger("BasicSimulation")

    logger.info("=== Basic M/M/c/K Simulation ===")

    model = QueueingSystem(
        arrival_config={'distribution': 'exponential', 'mean': 1.0},
        service_config={'distribution': 'exponential', 'mean': 1.6},
        num_servers=2,
        system_capacity=10,
        seed=7,
    )
    profile = SimulationProfile(model=model, run_strategy=DurationRunStrategy(2000.0, 200.0))

    result = SimulationEngine(profile).run()

    logger.info("=== Results ===")
    logger.info(str(result))
    for key, value in result.metrics.items():
        logger.info(f"  {key}: {value}")


if __name__ == "__main__":
    main()
