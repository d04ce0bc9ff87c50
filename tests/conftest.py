"""Root-level pytest fixtures for the deltagam test suite.

Provides shared configuration fixtures following Pydantic-based architecture.
All tests must use these fixtures instead of creating raw dict configs.
"""

import logging

import pytest
from pathlib import Path
import tempfile
import shutil

from deltagam.schemas import ParamConfig, UserConfig, resolve_config
from deltagam.setup_directories import setup_output_directories

from helpers.fake_survey import make_observations, make_grid, make_three_tows


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.
    
    Use this as the base for all test configs. Override specific values
    using user_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).
    
    Use this when tests don't care about specific config values and just
    need a valid InternalConfig to pass to constructors.
    
    Examples
    --------
    >>> def test_loader_init(internal_config):
    ...     loader = SurveyDataLoader(internal_config)
    ...     assert loader.coord_scale == 10.0
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.
    
    Use this when you need to override specific values for a test.
    Returns a callable that accepts UserConfig-compatible kwargs.
    
    Examples
    --------
    >>> def test_custom_cutoff(make_config):
    ...     config = make_config(y_cutoff=4.5)
    ...     loader = SurveyDataLoader(config)
    ...     assert loader.y_cutoff == 4.5
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)
    
    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard deltagam output directory structure.
    
    Returns dict with keys: base, tables, plots, logs
    All directories are created and cleaned up automatically.
    """
    return setup_output_directories(temp_dir / "output")


# =============================================================================
# Survey Fixtures
# =============================================================================

@pytest.fixture
def observations():
    """Prepared synthetic observations (scaled coordinates, presence label)."""
    return make_observations(n=300, seed=7)


@pytest.fixture
def grid(observations):
    """Prepared synthetic grid inside the observed depth range."""
    return make_grid(observations, nx=12, ny=10)


@pytest.fixture
def three_observations():
    """Smallest delta dataset: one absence and two positive tows."""
    return make_three_tows()


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def isolated_root_logger():
    """Restore root logger handlers replaced by the orchestrator."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
