"""M/M/c/K style queueing system built from a generator, a queue and servers."""

import itertools
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from ..core.exceptions import InvalidOperationError, OutOfRangeError
from ..core.run_context import RunContext
from ..statistics.server_observer import ServerObserver
from ..utils.logger import setup_logger
from ..workload.distributions import build_sampler
from .base import IdSource, SimulationModel
from .generator import Generator, GeneratorConfig
from .queue import QueueConfig, SimQueue
from .server import Server, ServerConfig


@dataclass(eq=False)
class Customer:
    """Load flowing through a queueing system.

    Attributes:
        customer_id: Sequence number within its system
        created_at: Generation time
        service_started_at: Time service began, if it has
        departed_at: Time service ended, if it has
    """
    customer_id: int
    created_at: float = 0.0
    service_started_at: Optional[float] = None
    departed_at: Optional[float] = None


class QueueingSystem(SimulationModel):
    """``c`` parallel servers behind one FIFO waiting line of size ``K - c``.

    Arrivals go straight to an idle server when nobody is waiting,
    otherwise they join the queue, and balk when the queue is full. Each
    departure pokes the queue so the head customer moves to the freed
    server.
    """

    def __init__(
        self,
        arrival_config: Dict,
        service_config: Dict,
        num_servers: int = 1,
        system_capacity: float = math.inf,
        seed: int = 42,
        name: str = "mmck",
        is_skipping_first: bool = True,
        id_source: Optional[IdSource] = None,
        record_history: bool = False,
    ):
        """Initialize system.

        Args:
            arrival_config: Inter-arrival distribution config
            service_config: Service time distribution config
            num_servers: Number of servers ``c``
            system_capacity: Maximum customers in the system ``K``
            seed: Base seed; the generator uses it, server ``i`` uses ``seed + i + 1``
            name: Instance name
            is_skipping_first: Whether the first arrival waits one inter-arrival time
            id_source: Identifier source for this model and its components
            record_history: Keep the full queue occupancy history
        """
        ids = id_source or IdSource()
        super().__init__(name, ids.next_id())

        if num_servers < 1:
            raise OutOfRangeError(f"Number of servers must be positive, got {num_servers}")
        if system_capacity < num_servers:
            raise OutOfRangeError(
                f"System capacity ({system_capacity}) cannot be less than the number of servers ({num_servers})"
            )

        self.logger = setup_logger(self.__class__.__name__)
        self.num_servers = num_servers
        self.system_capacity = system_capacity
        self._customer_ids = itertools.count(1)
        self._context: Optional[RunContext] = None

        inter_arrival = build_sampler(arrival_config)
        service_time = build_sampler(service_config)

        self.generator = self.add_component(Generator(
            GeneratorConfig(
                inter_arrival_time=inter_arrival,
                load_factory=lambda rng: Customer(customer_id=next(self._customer_ids)),
                is_skipping_first=is_skipping_first,
            ),
            seed=seed,
            name=f"{name}_arrivals",
            model_id=ids.next_id(),
        ))

        self.queue: Optional[SimQueue] = None
        waiting_room = system_capacity - num_servers
        if waiting_room > 0:
            self.queue = self.add_component(SimQueue(
                QueueConfig(capacity=waiting_room, record_history=record_history),
                name=f"{name}_queue",
                model_id=ids.next_id(),
            ))

        self.servers: List[Server] = []
        for i in range(num_servers):
            server = self.add_component(Server(
                ServerConfig(service_time=lambda load, rng: service_time(rng)),
                seed=seed + i + 1,
                name=f"{name}_server{i + 1}",
                model_id=ids.next_id(),
            ))
            server.load_departed.subscribe(self._on_load_departed)
            self.servers.append(server)

        self.server_observers = [ServerObserver(server) for server in self.servers]

        self.generator.load_generated.subscribe(self._on_load_generated)
        if self.queue is not None:
            self.queue.load_dequeued.subscribe(self._on_load_dequeued)
            self.queue.load_enqueued.subscribe(self._on_load_enqueued)
            self.queue.load_balked.subscribe(self._on_load_balked)

        self._reset_counters()
        self.logger.info(
            f"QueueingSystem '{name}' created: c={num_servers}, K={system_capacity}"
        )

    @classmethod
    def from_config(cls, config: Dict, seed: int = 42, id_source: Optional[IdSource] = None) -> "QueueingSystem":
        """Build a system from the ``model`` section of a config.

        Args:
            config: Dict with ``arrival``, ``service``, ``servers`` and
                optional ``system_capacity`` (None for unbounded), ``name``,
                ``is_skipping_first`` and ``record_history``
            seed: Base seed
            id_source: Identifier source

        Returns:
            Configured system
        """
        capacity = config.get('system_capacity')
        return cls(
            arrival_config=config.get('arrival', {}),
            service_config=config.get('service', {}),
            num_servers=config.get('servers', 1),
            system_capacity=math.inf if capacity is None else capacity,
            seed=seed,
            name=config.get('name', 'mmck'),
            is_skipping_first=config.get('is_skipping_first', True),
            id_source=id_source,
            record_history=config.get('record_history', False),
        )

    def _reset_counters(self) -> None:
        self.balked_count = 0
        self.lost_count = 0
        self.entered_count = 0
        self.completed_count = 0
        self._waiting_times: List[float] = []
        self._sojourn_times: List[float] = []

    @property
    def generated_count(self) -> int:
        return self.generator.loads_generated_count

    @property
    def number_in_system(self) -> int:
        waiting = self.queue.occupancy if self.queue is not None else 0
        return waiting + sum(server.number_in_service for server in self.servers)

    def initialize(self, context: RunContext) -> None:
        self._context = context
        super().initialize(context)

    def warmed_up(self, time: float) -> None:
        super().warmed_up(time)
        for observer in self.server_observers:
            observer.warmed_up(time)
        self._reset_counters()
        self.logger.info(f"QueueingSystem '{self.name}' warmed up at {time}; statistics reset")

    def _idle_server(self) -> Optional[Server]:
        for server in self.servers:
            if server.vacancy > 0:
                return server
        return None

    def _start_service(self, server: Server, customer: Customer, time: float) -> None:
        customer.service_started_at = time
        self._waiting_times.append(time - customer.created_at)
        server.try_start_service(customer, self._require_context())

    def _require_context(self) -> RunContext:
        if self._context is None:
            raise InvalidOperationError(f"QueueingSystem '{self.name}' has not been initialized")
        return self._context

    def _on_load_generated(self, customer: Customer, time: float) -> None:
        customer.created_at = time
        context = self._require_context()

        server = self._idle_server()
        nobody_waiting = self.queue is None or self.queue.occupancy == 0
        if server is not None and nobody_waiting:
            self.entered_count += 1
            self._start_service(server, customer, time)
            return

        if self.queue is not None:
            self.queue.try_schedule_enqueue(customer, context)
            return

        self._on_load_balked(customer, time)

    def _on_load_balked(self, customer: Customer, time: float) -> None:
        self.balked_count += 1
        self.logger.debug(f"Customer {customer.customer_id} balked at {time}")

    def _on_load_enqueued(self, customer: Customer, time: float) -> None:
        self.entered_count += 1
        if self._idle_server() is not None:
            self.queue.trigger_dequeue_attempt(self._require_context())

    def _on_load_dequeued(self, customer: Customer, time: float) -> None:
        server = self._idle_server()
        if server is None:
            self.lost_count += 1
            self.logger.warning(
                f"Customer {customer.customer_id} dequeued at {time} but no server is idle; customer lost"
            )
            return
        self._start_service(server, customer, time)

    def _on_load_departed(self, customer: Customer, time: float) -> None:
        customer.departed_at = time
        self.completed_count += 1
        self._sojourn_times.append(time - customer.created_at)
        if self.queue is not None:
            self.queue.trigger_dequeue_attempt(self._require_context())

    def summary(self) -> Dict[str, Any]:
        """Collected statistics since the start or the warm-up."""
        utilizations = [observer.utilization for observer in self.server_observers]
        summary = {
            'generated': self.generated_count,
            'entered': self.entered_count,
            'balked': self.balked_count,
            'lost': self.lost_count,
            'completed': self.completed_count,
            'in_system': self.number_in_system,
            'balk_ratio': self.balked_count / self.generated_count if self.generated_count else 0.0,
            'mean_utilization': float(np.mean(utilizations)) if utilizations else 0.0,
            'mean_waiting_time': float(np.mean(self._waiting_times)) if self._waiting_times else 0.0,
            'mean_sojourn_time': float(np.mean(self._sojourn_times)) if self._sojourn_times else 0.0,
            'p95_sojourn_time': float(np.percentile(self._sojourn_times, 95)) if self._sojourn_times else 0.0,
        }
        if self.queue is not None:
            summary['mean_queue_length'] = self.queue.occupancy_metric.average_count
        else:
            summary['mean_queue_length'] = 0.0
        return summary
