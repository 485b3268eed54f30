"""Stop a simulation once a given number of customers has been served."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from flowsim import ConditionalRunStrategy, SimulationEngine, SimulationProfile
from flowsim.modeling import QueueingSystem
from flowsim.statistics import MemoryTracer
from flowsim.utils.logger import setup_logger


def main():
    """Run until 500 customers completed, then log executed events per type."""
    logger = setup_logger("ConditionalStop")

    model = QueueingSystem(
        arrival_config={'distribution': 'exponential', 'mean': 2.0},
        service_config={'distribution': 'gamma', 'mean': 1.5, 'std': 0.5},
        num_servers=1,
        seed=11,
    )
    strategy = ConditionalRunStrategy(lambda context: model.completed_count < 500)
    tracer = MemoryTracer()

    result = SimulationEngine(SimulationProfile(model, strategy, tracer=tracer)).run()

    logger.info(str(result))
    frame = tracer.to_dataframe()
    logger.info(f"Events by type:\n{frame[frame['point'] == 'completed']['event_type'].value_counts()}")


if __name__ == "__main__":
    main()
