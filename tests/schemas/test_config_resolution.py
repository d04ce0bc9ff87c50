"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from deltagam.schemas import (
    ParamConfig, UserConfig, CLIConfig, InternalConfig,
    LinearSpec, AdditiveSpatialSpec,
)
from deltagam.schemas.resolve import resolve_config, deep_merge, merge_model_spec

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert isinstance(config.presence, LinearSpec)
        assert isinstance(config.magnitude, LinearSpec)
        assert config.presence.depth_degree == 2
        assert config.data.coord_scale == 10.0
        assert config.data.y_cutoff is None
        assert config.profile.n_points == 100
        assert config.profile.ci_multiplier == 1.96
        assert config.observations_path is None

    def test_user_config_overrides_param_config(self):
        """UserConfig values override ParamConfig defaults."""
        user = UserConfig(y_cutoff=45, coord_scale=1)
        config = resolve_config(ParamConfig(), user, None)

        assert config.data.y_cutoff == 45.0
        assert config.data.coord_scale == 1.0

    def test_empty_user_config_uses_all_param_defaults(self):
        """Empty UserConfig() doesn't override anything."""
        config = resolve_config(ParamConfig(), UserConfig(), None)

        assert config.presence.kind == "linear"
        assert config.visualization.enabled is True

    def test_dict_inputs_are_validated(self):
        """Plain dicts are accepted at every layer."""
        config = resolve_config({}, {"MODEL": "gam"}, {"log_level": "DEBUG"})

        assert config.presence.kind == "additive_spatial"
        assert config.logging.level == "DEBUG"

    def test_internal_config_is_frozen(self):
        """Runtime config cannot be mutated."""
        config = resolve_config(ParamConfig(), None, None)

        with pytest.raises(ValidationError):
            config.base_dir = "/elsewhere"


class TestModelSpecResolution:
    """Tagged model spec variants through the config layers."""

    def test_model_alias_switches_both_specs(self):
        """MODEL=gam selects the spatial GAM for presence and magnitude."""
        config = resolve_config(ParamConfig(), UserConfig(MODEL="gam"), None)

        assert isinstance(config.presence, AdditiveSpatialSpec)
        assert isinstance(config.magnitude, AdditiveSpatialSpec)
        assert config.magnitude.n_splines == (10, 10)

    def test_per_model_kind(self):
        """Presence and magnitude may use different variants."""
        user = UserConfig(PRESENCE_MODEL="glm", MAGNITUDE_MODEL="gam")
        config = resolve_config(ParamConfig(), user, None)

        assert config.presence.kind == "linear"
        assert config.magnitude.kind == "additive_spatial"

    def test_depth_degree_survives_kind_switch(self):
        """Shared fields carry over when the variant changes."""
        user = UserConfig(MODEL="gam", DEPTH_DEGREE=1)
        config = resolve_config(ParamConfig(), user, None)

        assert config.presence.depth_degree == 1
        assert config.magnitude.depth_degree == 1

    def test_nested_spec_overrides(self):
        """Nested sections tune the anisotropic smooth per model."""
        user = UserConfig(
            MODEL="gam",
            magnitude={"n_splines": (12, 6), "lam": (0.1, 2.0)},
        )
        config = resolve_config(ParamConfig(), user, None)

        assert config.magnitude.n_splines == (12, 6)
        assert config.magnitude.lam == (0.1, 2.0)
        assert config.presence.n_splines == (10, 10)

    def test_gam_fields_rejected_on_linear_spec(self):
        """A linear spec has no smooth to configure."""
        user = UserConfig(presence={"n_splines": (8, 8)})

        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), user, None)

    def test_invalid_basis_size_rejected(self):
        with pytest.raises(ValidationError, match="n_splines"):
            AdditiveSpatialSpec(n_splines=(3, 10))

    def test_negative_penalty_rejected(self):
        with pytest.raises(ValidationError, match="lam"):
            AdditiveSpatialSpec(lam=(0.6, -1.0))

    def test_depth_degree_bounds(self):
        with pytest.raises(ValidationError):
            LinearSpec(depth_degree=-1)


class TestMergeHelpers:

    def test_deep_merge_nested(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        merged = deep_merge(base, {"b": {"d": 4}}, {"e": 5})

        assert merged == {"a": 1, "b": {"c": 2, "d": 4}, "e": 5}
        assert base["b"]["d"] == 3

    def test_merge_model_spec_same_kind_keeps_fields(self):
        base = {"kind": "additive_spatial", "depth_degree": 2, "lam": (1.0, 1.0)}
        merged = merge_model_spec(base, {"kind": "additive_spatial", "depth_degree": 1})

        assert merged == {"kind": "additive_spatial", "depth_degree": 1, "lam": (1.0, 1.0)}

    def test_merge_model_spec_kind_switch_drops_variant_fields(self):
        base = {"kind": "additive_spatial", "depth_degree": 1, "lam": (1.0, 1.0)}
        merged = merge_model_spec(base, {"kind": "linear"})

        assert merged == {"depth_degree": 1, "kind": "linear"}
