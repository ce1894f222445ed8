"""Unit tests for the configuration context."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from src.backend.runtime.config.config_data import ConfigData
from src.backend.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    set_context,
    with_context,
)


class TestContextManager:
    """Test the context manager functionality."""

    def test_default_context_available(self):
        """Should have a default context available."""
        context = get_context()
        config = get_config()

        assert isinstance(context, AppContext)
        assert isinstance(config, ConfigData)
        assert context.config is config

    def test_with_context_override_single_level(self):
        """Should override config for the duration of the context manager."""
        original_config = get_config()

        test_config = ConfigData()
        test_config.database.backend = "document"

        with with_context(test_config):
            override_config = get_config()
            assert override_config.database.backend == "document"
            assert override_config is not original_config

        after_config = get_config()
        assert after_config.database.backend == original_config.database.backend
        assert after_config is original_config

    def test_unset_fields_are_inherited(self):
        """Only explicitly set fields replace the current values."""
        original_secret = get_config().jwt.secret

        test_config = ConfigData()
        test_config.pagination.max_limit = 5

        with with_context(test_config):
            assert get_config().pagination.max_limit == 5
            assert get_config().pagination.default_limit == 10
            assert get_config().jwt.secret == original_secret

    def test_with_context_nested_overrides(self):
        """Should handle nested context overrides correctly."""
        level1_config = ConfigData()
        level1_config.jwt.clock_skew = 10
        level1_config.app.environment = "production"

        with with_context(level1_config):
            level2_config = ConfigData()
            level2_config.jwt.clock_skew = 20

            with with_context(level2_config):
                assert get_config().jwt.clock_skew == 20
                assert get_config().app.environment == "production"

            assert get_config().jwt.clock_skew == 10

    def test_with_context_no_override(self):
        """Should work without any override (current context)."""
        original_config = get_config()

        with with_context():
            assert get_config() is original_config

    def test_exception_handling_in_context(self):
        """Should properly restore context even when exceptions occur."""
        original_config = get_config()

        test_config = ConfigData()
        test_config.security.bcrypt_rounds = 12

        try:
            with with_context(test_config):
                assert get_config().security.bcrypt_rounds == 12
                raise ValueError("Test exception")
        except ValueError:
            pass

        assert get_config() is original_config

    def test_rejects_non_config_override(self):
        with pytest.raises(ValueError, match="ConfigData"):
            with with_context({"database": {"backend": "document"}}):
                pass

    def test_set_config_replaces_whole_config(self):
        original_context = get_context()
        replacement = ConfigData()
        replacement.pagination.max_limit = 3

        try:
            set_config(replacement)
            assert get_config() is replacement
        finally:
            set_context(original_context)

    def test_threads_start_from_default_context(self):
        """Overrides do not leak into threads started elsewhere."""
        test_config = ConfigData()
        test_config.pagination.max_limit = 7

        with with_context(test_config):
            with ThreadPoolExecutor(max_workers=1) as pool:
                seen = pool.submit(lambda: get_config().pagination.max_limit).result()

        assert seen == 50
