import unittest
from fastapi.testclient import TestClient
from greenwave import main
from greenwave.domain.models import SimulationConfig

class TestApi(unittest.TestCase):
    def setUp(self):
        # No lifespan: the driver loop stays off and the tests step the kernel
        self.client = TestClient(main.app)
        main.kernel.command_queue.clear()
        main.kernel.pause()
        main.kernel.initialize(SimulationConfig())

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["running"])

    def test_scene_snapshot(self):
        response = self.client.get("/api/scene")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["tick"], 0)
        self.assertEqual([l["id"] for l in data["lights"]], ["left", "middle", "right"])
        self.assertEqual(data["lights"][0]["phase"], "GREEN")
        self.assertEqual(data["vehicles"], [])

    def test_config_update_is_queued_until_next_frame(self):
        response = self.client.post("/api/config", json={"speedLimit": 45, "lightOffset": {"middle": -4}})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "queued", "pending": 1})
        self.assertEqual(self.client.get("/api/config").json()["speed_limit"], 60)

        main.kernel.apply_pending()
        data = self.client.get("/api/config").json()
        self.assertEqual(data["speed_limit"], 45)
        self.assertEqual(data["light_offsets"], [0, -4, 12])

    def test_config_update_by_light_index(self):
        response = self.client.post("/api/config", json={"lightOffset": {"2": 5}, "lightCycleDuration": {"1": 24}})
        self.assertEqual(response.status_code, 200)
        main.kernel.apply_pending()
        data = self.client.get("/api/config").json()
        self.assertEqual(data["light_offsets"], [0, 6, 5])
        self.assertEqual(data["light_cycle_times"], [30, 24, 30])

    def test_invalid_config_rejected(self):
        for payload in ({"speedLimit": -1}, {"lightOffset": {"centre": 2}}, {"lightCycleDuration": {"left": 0}},
                    {"lightOffset": {"3": 1}}):
            response = self.client.post("/api/config", json=payload)
            self.assertEqual(response.status_code, 422, msg=str(payload))
        self.assertEqual(len(main.kernel.command_queue), 0)

    def test_lifecycle_commands(self):
        self.client.post("/api/simulation/start")
        main.kernel.apply_pending()
        self.assertTrue(main.kernel.running)
        for _ in range(10):
            main.kernel.run_tick()
        scene = self.client.get("/api/scene").json()
        self.assertEqual(scene["tick"], 10)
        self.assertEqual(len(scene["vehicles"]), 2)

        self.client.post("/api/simulation/pause")
        main.kernel.apply_pending()
        self.assertFalse(main.kernel.running)

        self.client.post("/api/simulation/reset")
        main.kernel.apply_pending()
        scene = self.client.get("/api/scene").json()
        self.assertEqual(scene["tick"], 0)
        self.assertEqual(scene["vehicles"], [])

    def test_stats(self):
        response = self.client.get("/api/stats")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["forward"]["spawned"], 0)

if __name__ == '__main__':
    unittest.main()
