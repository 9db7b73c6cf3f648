import tempfile
import unittest
from pathlib import Path

from app_config_schema import UIServerSettings
from server.config import ServerConfigurationError, UIServerConfig


class UIServerConfigTests(unittest.TestCase):
    def test_from_settings_uses_bundled_index_page(self) -> None:
        settings = UIServerSettings(enabled=True, host="127.0.0.1", port=8765, index_file="")

        config = UIServerConfig.from_settings(settings)

        self.assertEqual(("web_ui", "index.html"), Path(config.index_file).parts[-2:])
        self.assertTrue(Path(config.index_file).is_file())
        self.assertEqual("/ws", config.websocket_path)

    def test_from_settings_prefers_explicit_index_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            custom = Path(temp_dir) / "index.html"
            custom.write_text("<html></html>", encoding="utf-8")

            settings = UIServerSettings(
                enabled=True,
                host="127.0.0.1",
                port=8765,
                index_file=str(custom),
            )

            config = UIServerConfig.from_settings(settings)
            self.assertEqual(str(custom), config.index_file)

    def test_rejects_missing_index_file_when_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing.html"
            with self.assertRaises(ServerConfigurationError):
                UIServerConfig(enabled=True, index_file=str(missing))

            config = UIServerConfig(enabled=False, index_file=str(missing))
            self.assertFalse(config.enabled)

    def test_rejects_invalid_host_and_port(self) -> None:
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, host="  ")
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, port=0)
        with self.assertRaises(ServerConfigurationError):
            UIServerConfig(enabled=False, port=70000)


if __name__ == "__main__":
    unittest.main()
