"""Tests for environment configuration."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from bda_mcp.config import get_config, get_poll_settings, load_bindings, parse_bindings
from bda_mcp.errors import ConfigurationError
from bda_mcp.factory import build_blob_store, build_engine
from bda_mcp.sources.store_plugins.local import LocalBlobStore

BINDINGS_YAML = """
databases:
  cart:
    database: cart_prod
    output_location: s3://aws-athena-query-results/
    source_location: s3://warehouse/cart/
  orders:
    output_location: s3://aws-athena-query-results/orders/
"""


class TestBindings(unittest.TestCase):
    """Test loading of database bindings."""

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "databases.yaml"
            path.write_text(BINDINGS_YAML)

            bindings = load_bindings(path)

        self.assertEqual(["cart", "orders"], list(bindings))
        self.assertEqual("cart_prod", bindings["cart"].database)
        self.assertEqual("s3://warehouse/cart/", bindings["cart"].source_location)
        self.assertEqual("orders", bindings["orders"].database)

    def test_load_from_env_file_variable(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "databases.yaml"
            path.write_text(BINDINGS_YAML)
            with patch.dict(os.environ, {"BDA_DATABASES_FILE": str(path)}):
                bindings = load_bindings()

        self.assertEqual(2, len(bindings))

    def test_load_inline_json(self):
        inline = '{"cart": {"database": "cart", "output_location": "s3://results/"}}'
        with patch.dict(os.environ, {"BDA_DATABASES": inline}, clear=True):
            bindings = load_bindings()

        self.assertEqual("s3://results/", bindings["cart"].output_location)

    def test_nothing_configured(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(0, len(load_bindings()))

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_bindings("/nonexistent/databases.yaml")

    def test_invalid_yaml(self):
        with patch.dict(os.environ, {"BDA_DATABASES": "cart: [unclosed"}, clear=True):
            with self.assertRaises(ConfigurationError):
                load_bindings()

    def test_invalid_binding(self):
        with self.assertRaises(ConfigurationError):
            parse_bindings({"databases": {"cart": {"database": "cart"}}})
        with self.assertRaises(ConfigurationError):
            parse_bindings({"databases": {"cart": "s3://results/"}})
        with self.assertRaises(ConfigurationError):
            parse_bindings({"databases": ["cart"]})


class TestSettings(unittest.TestCase):
    """Test settings read from the environment."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = get_config()
            settings = get_poll_settings()

        self.assertEqual("us-east-1", config["aws"]["region"])
        self.assertEqual("athena", config["query_service"]["type"])
        self.assertFalse(config["query_service"]["strict_conversion"])
        self.assertEqual("s3", config["blob_store"]["type"])
        self.assertEqual(0.5, settings.initial_delay)
        self.assertEqual(600.0, settings.timeout)

    def test_overrides(self):
        env = {
            "AWS_DEFAULT_REGION": "ap-southeast-1",
            "BDA_STRICT_CONVERSION": "true",
            "BDA_POLL_INITIAL_DELAY": "1",
            "BDA_POLL_MAX_DELAY": "30",
            "BDA_POLL_TIMEOUT": "0",
        }
        with patch.dict(os.environ, env, clear=True):
            config = get_config()
            settings = get_poll_settings()

        self.assertEqual("ap-southeast-1", config["aws"]["region"])
        self.assertTrue(config["query_service"]["strict_conversion"])
        self.assertEqual(30.0, settings.max_delay)
        self.assertIsNone(settings.timeout)

    def test_invalid_numbers(self):
        with patch.dict(os.environ, {"BDA_POLL_TIMEOUT": "soon"}, clear=True):
            with self.assertRaises(ConfigurationError):
                get_poll_settings()
        with patch.dict(os.environ, {"BDA_POLL_INITIAL_DELAY": "20", "BDA_POLL_MAX_DELAY": "5"}, clear=True):
            with self.assertRaises(ConfigurationError):
                get_poll_settings()


class TestFactory(unittest.TestCase):
    """Test wiring of engines and stores from the environment."""

    def test_build_engine_with_service(self):
        service = MagicMock()
        with patch.dict(os.environ, {"BDA_DATABASES": BINDINGS_YAML}, clear=True):
            engine = build_engine(service=service)

        self.assertEqual(["cart", "orders"], list(engine.bindings))

    @patch("bda_mcp.factory.create_query_service")
    def test_build_engine_creates_service(self, mock_create_service):
        with patch.dict(os.environ, {"AWS_REGION": "eu-central-1"}, clear=True):
            build_engine()

        mock_create_service.assert_called_once_with("athena", region="eu-central-1", profile=None)

    def test_build_local_blob_store(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"BDA_BLOB_STORE": "local", "BDA_LOCAL_ROOT": temp_dir}, clear=True):
                store = build_blob_store()

            self.assertIsInstance(store, LocalBlobStore)
            self.assertEqual(Path(temp_dir).resolve(), store.root)

    def test_build_unknown_blob_store(self):
        with patch.dict(os.environ, {"BDA_BLOB_STORE": "ftp"}, clear=True):
            with self.assertRaises(ConfigurationError):
                build_blob_store()


if __name__ == "__main__":
    unittest.main()
