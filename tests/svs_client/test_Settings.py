import unittest
import tempfile
from pathlib import Path

import tomli_w

from svs_client import Settings
from svs_model import ThermalState


class TestSettings(unittest.TestCase):
    def setUp(self):
        self.tempfile = tempfile.NamedTemporaryFile(delete=False, suffix=".toml")
        self.path = self.tempfile.name
        self.tempfile.close()

    def tearDown(self):
        Path(self.path).unlink(missing_ok=True)

    def write(self, data):
        with open(self.path, "wb") as f:
            f.write(tomli_w.dumps(data).encode("utf-8"))

    def test_load_defaults_if_file_missing(self):
        Path(self.path).unlink()
        settings = Settings(self.path)
        self.assertEqual(settings.get("backend_url"), "ws://0.0.0.0:8888")
        self.assertEqual(settings.get("stream")["n_streams"], 5)
        self.assertEqual(settings.settings["metrics"]["batch_size"], 32)

    def test_save_and_load_round_trip(self):
        settings = Settings(self.path)
        settings.set("backend_url", "ws://example.invalid:9000")
        settings.set("stream", {"n_streams": 2, "fps": 30, "resolution": 480})
        settings.save()

        loaded = Settings(self.path)
        self.assertEqual(loaded.get("backend_url"), "ws://example.invalid:9000")
        self.assertEqual(loaded.get("stream")["fps"], 30)
        self.assertEqual(loaded.get("stream")["resolution"], 480)

    def test_merge_partial_override(self):
        self.write({
            "stream": {"fps": 30},
            "slos": {"max_thermal_state": "serious"},
        })

        settings = Settings(self.path)
        self.assertEqual(settings.settings["stream"]["fps"], 30)
        self.assertEqual(settings.settings["stream"]["resolution"], 720)
        self.assertEqual(settings.settings["slos"]["min_streams"], 5)
        self.assertEqual(settings.slos().max_thermal_state, ThermalState.SERIOUS)

    def test_defaults_are_not_shared(self):
        Path(self.path).unlink()
        settings = Settings(self.path)
        settings.get("stream")["fps"] = 1

        self.assertEqual(Settings.DEFAULTS["stream"]["fps"], 15)

    def test_delete_key(self):
        settings = Settings(self.path)
        settings.delete("log")
        self.assertNotIn("log", settings.settings)
        settings.delete("log")

    def test_stream_settings_get_new_ids(self):
        settings = Settings(self.path)

        first = settings.stream_settings()
        second = settings.stream_settings()

        self.assertNotEqual(first.id, second.id)
        self.assertTrue(first.equal_without_id(second))
        self.assertEqual(first.number_of_streams, 5)
        self.assertEqual(first.fps, 15)
        self.assertEqual(first.resolution, 720)

    def test_slos(self):
        slos = Settings(self.path).slos()

        self.assertEqual(slos.max_network_usage, 10 * 1024 * 1024)
        self.assertEqual(slos.min_average_fps, 15.0)
        self.assertEqual(slos.min_streams, 5)
        self.assertEqual(slos.max_average_render_scale_factor, 1.6)
        self.assertEqual(slos.max_thermal_state, ThermalState.FAIR)

    def test_invalid_thermal_state(self):
        self.write({"slos": {"max_thermal_state": "lukewarm"}})

        with self.assertRaises(ValueError):
            Settings(self.path).slos()


if __name__ == "__main__":
    unittest.main()
