"""End-to-end runs showing the one-directional green wave."""
import unittest
from greenwave.domain.models import ConfigUpdate, Direction, SignalState, SimulationConfig
from greenwave.domain import units
from greenwave.kernel.simulation_kernel import SimulationKernel

def green_wave_config(**overrides):
    # Middle light halfway: forward travel times of 0s, 6s and 12s at 60 mph
    values = dict(
        speed_limit=60, middle_light_position_percent=50,
        light_offsets=[0, 6, 12], light_cycle_times=[30, 30, 30]
    )
    values.update(overrides)
    return SimulationConfig(**values)

def first_vehicle(kernel, direction):
    return next(v for v in kernel.state.vehicles if v.direction is direction)

def is_live(kernel, vehicle):
    return any(v.id == vehicle.id for v in kernel.state.vehicles)

class TestGreenWave(unittest.TestCase):
    def test_light_arrival_times(self):
        kernel = SimulationKernel(green_wave_config())
        arrivals = [l.optimal_arrival for l in kernel.state.lights]
        for actual, expected in zip(arrivals, (0.0, 6.0, 12.0)):
            self.assertAlmostEqual(actual, expected)
        self.assertTrue(all(l.arrival_phase == SignalState.GREEN for l in kernel.state.lights))

    def test_forward_vehicle_passes_every_light_on_green(self):
        kernel = SimulationKernel(green_wave_config())
        kernel.start()
        vehicle = first_vehicle(kernel, Direction.FORWARD)
        half = kernel.vehicle_system.vehicle_length / 2

        crossings = {}
        for _ in range(2000):
            if not is_live(kernel, vehicle) or len(crossings) == 3:
                break
            front_before = vehicle.position + half
            kernel.run_tick()
            front_after = vehicle.position + half
            for light in kernel.state.lights:
                if front_before < light.stop_line(Direction.FORWARD) <= front_after:
                    crossings[light.id] = light.phase

        self.assertEqual(crossings, {
            "left": SignalState.GREEN, "middle": SignalState.GREEN, "right": SignalState.GREEN
        })
        self.assertFalse(vehicle.hit_red_light)

    def test_reverse_vehicle_is_stopped_by_red(self):
        kernel = SimulationKernel(green_wave_config())
        kernel.start()
        vehicle = first_vehicle(kernel, Direction.REVERSE)

        blocked_at = None
        for _ in range(1500):
            kernel.run_tick()
            if vehicle.hit_red_light:
                blocked_at = kernel.state.tick_id
                break

        self.assertIsNotNone(blocked_at)
        # The right light is the first one a reverse vehicle meets
        right = kernel.state.lights[2]
        self.assertEqual(right.phase, SignalState.RED)
        self.assertGreaterEqual(vehicle.position - 16.0, right.stop_line(Direction.REVERSE))

    def test_stopped_vehicle_waits_out_the_red(self):
        kernel = SimulationKernel(green_wave_config())
        kernel.start()
        vehicle = first_vehicle(kernel, Direction.REVERSE)
        while not vehicle.hit_red_light:
            kernel.run_tick()

        right = kernel.state.lights[2]
        held_ticks = 0
        while True:
            position = vehicle.position
            kernel.run_tick()
            if right.phase != SignalState.RED:
                break
            self.assertEqual(vehicle.position, position)
            held_ticks += 1

        self.assertGreater(held_ticks, 0)
        self.assertEqual(right.phase, SignalState.GREEN)
        self.assertLess(vehicle.position, position)

    def test_equal_schedules_still_stop_someone(self):
        kernel = SimulationKernel(green_wave_config(
            middle_light_position_percent=35, light_offsets=[0, 0, 0]
        ))
        kernel.start()

        flagged = set()
        for _ in range(1800):
            kernel.run_tick()
            phases = {l.phase for l in kernel.state.lights}
            self.assertEqual(len(phases), 1)
            flagged.update(v.id for v in kernel.state.vehicles if v.hit_red_light)

        self.assertTrue(flagged)

    def test_speed_change_mid_run(self):
        kernel = SimulationKernel(green_wave_config())
        kernel.start()
        for _ in range(300):
            kernel.run_tick()

        positions = {v.id: v.position for v in kernel.state.vehicles}
        right = kernel.state.lights[2]
        self.assertAlmostEqual(right.optimal_arrival, 12.0)
        self.assertEqual(right.arrival_phase, SignalState.GREEN)

        kernel.update_config(ConfigUpdate(speed_limit=20))
        new_speed = units.mph_to_units_per_tick(20)
        for v in kernel.state.vehicles:
            self.assertEqual(v.speed, new_speed)
            self.assertEqual(v.position, positions[v.id])
        # Light timing is re-derived on the next tick, not retroactively
        self.assertAlmostEqual(right.optimal_arrival, 12.0)

        kernel.run_tick()
        self.assertAlmostEqual(right.optimal_arrival, 36.0)
        self.assertEqual(right.arrival_phase, SignalState.RED)

class TestRunInvariants(unittest.TestCase):
    def test_motion_flag_and_spacing_invariants(self):
        kernel = SimulationKernel()
        kernel.start()
        following = kernel.vehicle_system.following_distance

        for _ in range(3000):
            before = {v.id: (v.position, v.hit_red_light) for v in kernel.state.vehicles}
            kernel.run_tick()
            vehicles = kernel.state.vehicles

            for v in vehicles:
                if v.id not in before:
                    continue
                position, flagged = before[v.id]
                self.assertGreaterEqual(v.direction.sign * (v.position - position), 0)
                if flagged:
                    self.assertTrue(v.hit_red_light)

            # Every same-direction pair, including vehicles spawned this tick
            for i, lead in enumerate(vehicles):
                for trail in vehicles[i + 1:]:
                    if lead.direction != trail.direction:
                        continue
                    gap = abs(lead.position - trail.position)
                    self.assertGreaterEqual(
                        gap, following - 1e-9,
                        msg=f"{lead.id}/{trail.id} at tick {kernel.state.tick_id}"
                    )

    def test_same_config_same_run(self):
        runs = []
        for _ in range(2):
            kernel = SimulationKernel(green_wave_config())
            kernel.start()
            for _ in range(1000):
                kernel.run_tick()
            runs.append(kernel.get_state())
        self.assertEqual(runs[0], runs[1])

if __name__ == '__main__':
    unittest.main()
