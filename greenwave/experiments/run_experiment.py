import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from greenwave.domain.models import SimulationConfig
from greenwave.kernel.simulation_kernel import SimulationKernel
from greenwave.logging_setup import setup_logging

log = logging.getLogger(__name__)

DEFAULT_DURATION_TICKS = 3600

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Read an experiment file: ``{"duration_ticks": int, "simulation": {...}}``."""
    if not config_path:
        return {}
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Experiment config not found: {config_path}")
    with path.open() as f:
        return json.load(f)

def run_headless_experiment(config_path: Optional[str], output_path: str) -> Dict[str, Any]:
    experiment = load_config(config_path)
    duration_ticks = int(experiment.get("duration_ticks", DEFAULT_DURATION_TICKS))
    sim_config = SimulationConfig(**experiment.get("simulation", {}))

    kernel = SimulationKernel(sim_config)
    kernel.start()

    timeline = []

    start_time = time.time()
    for _ in range(duration_ticks):
        kernel.run_tick()
        vehicles = kernel.state.vehicles
        timeline.append({
            "tick": kernel.state.tick_id,
            "vehicle_count": len(vehicles),
            "stopped_at_red": sum(1 for v in vehicles if v.hit_red_light),
            "phases": [light.phase.value for light in kernel.state.lights]
        })

    end_time = time.time()
    log.info("Experiment finished in %.4fs (%d ticks)", end_time - start_time, duration_ticks)

    results = {
        "config": sim_config.model_dump(),
        "duration_ticks": duration_ticks,
        "stats": kernel.get_stats().model_dump(),
        "timeline": timeline
    }
    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)
    return results

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    setup_logging(logging.INFO)
    if len(argv) == 1:
        config_path, output_path = None, argv[0]
    elif len(argv) == 2:
        config_path, output_path = argv
    else:
        print("Usage: python -m greenwave.experiments.run_experiment [config.json] <output.json>")
        return 2

    try:
        results = run_headless_experiment(config_path, output_path)
    except (FileNotFoundError, ValidationError) as e:
        log.error("%s", e)
        return 1

    for direction in ("forward", "reverse"):
        stats = results["stats"][direction]
        log.info(
            "%s: %d retired, %d stopped at red (%d red ticks)",
            direction, stats["retired"], stats["retired_after_red"], stats["red_light_stops"]
        )
    return 0

if __name__ == "__main__":
    sys.exit(main())
