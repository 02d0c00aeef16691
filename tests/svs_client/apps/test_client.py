import importlib
import tempfile
import unittest
from collections import defaultdict
from pathlib import Path
from unittest.mock import patch

import tomli_w

from svs_control import State

client = importlib.import_module("svs_client.apps.client")


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = client.parse_args([])

        self.assertEqual(args.config, "settings.toml")
        self.assertIsNone(args.url)
        self.assertIsNone(args.log)

    def test_overrides(self):
        args = client.parse_args([
            "--config", "other.toml",
            "--url", "ws://example.invalid:1234",
            "--log", "debug",
        ])

        self.assertEqual(args.config, "other.toml")
        self.assertEqual(args.url, "ws://example.invalid:1234")
        self.assertEqual(args.log, "debug")


@patch("signal.signal")
@patch("logging.basicConfig")
class TestMain(unittest.TestCase):
    def setUp(self):
        self.tempfile = tempfile.NamedTemporaryFile(delete=False, suffix=".toml")
        self.path = self.tempfile.name
        self.tempfile.close()

        with open(self.path, "wb") as f:
            f.write(tomli_w.dumps({
                "backend_url": "ws://config.invalid:8888",
                "metrics": {"batch_size": 1},
            }).encode("utf-8"))

    def tearDown(self):
        Path(self.path).unlink(missing_ok=True)

    def run_main(self, argv):
        handlers = defaultdict(list)

        with patch.object(client, "Session") as mock_session_cls:
            session = mock_session_cls.return_value
            session.on.side_effect = lambda state, fn: handlers[state].append(fn)
            # Fail right away so the main loop ends
            session.connect.side_effect = lambda: [
                fn() for fn in handlers[State.CONNECTION_FAILED]
            ]

            client.main(argv)

        return mock_session_cls, session

    def test_session_from_config(self, mock_basic_config, mock_signal):
        mock_session_cls, session = self.run_main(["--config", self.path])

        args, kwargs = mock_session_cls.call_args
        self.assertEqual(args[0], "ws://config.invalid:8888")
        self.assertEqual(args[1].number_of_streams, 5)
        self.assertEqual(kwargs["batch_size"], 1)
        self.assertEqual(kwargs["metrics_window"], 1.0)

        session.start.assert_called_once()
        session.connect.assert_called_once()
        session.stop.assert_called_once()
        self.assertEqual(mock_signal.call_count, 2)

    def test_url_and_log_override(self, mock_basic_config, mock_signal):
        mock_session_cls, _ = self.run_main([
            "--config", self.path,
            "--url", "ws://cli.invalid:1",
            "--log", "debug",
        ])

        self.assertEqual(mock_session_cls.call_args[0][0], "ws://cli.invalid:1")
        self.assertEqual(mock_basic_config.call_args[1]["level"], 10)

    def test_invalid_log_level(self, mock_basic_config, mock_signal):
        with self.assertRaises(ValueError):
            client.main(["--config", self.path, "--log", "loud"])


if __name__ == "__main__":
    unittest.main()
