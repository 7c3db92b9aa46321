import pytest

from linksweep.launcher.propagation import (
    DEFAULT_MODEL_ORDER,
    FixedRss,
    Friis,
    Nakagami,
    ThreeLogDistance,
    TwoRayGround,
    UnknownPropagationModelError,
    channel_config,
    get_model,
    register_model,
)


def test_default_order_matches_campaigns():
    assert DEFAULT_MODEL_ORDER == ("Friis", "FixedRSS", "ThreeLogDistance", "TwoRayGround", "Nakagami")


@pytest.mark.parametrize(
    "model, type_id, attributes",
    [
        (Friis(), "ns3::FriisPropagationLossModel", {"Frequency": 5.18e9, "SystemLoss": 1.0}),
        (FixedRss(), "ns3::FixedRssLossModel", {"Rss": -75.0}),
        (
            ThreeLogDistance(),
            "ns3::ThreeLogDistancePropagationLossModel",
            {"Distance0": 1.0, "Distance1": 100.0, "Distance2": 500.0, "ReferenceLoss": 46.77},
        ),
        (
            TwoRayGround(),
            "ns3::TwoRayGroundPropagationLossModel",
            {"Frequency": 5.18e9, "MinDistance": 0.5, "SystemLoss": 1.0, "HeightAboveZ": 1.5},
        ),
        (
            Nakagami(),
            "ns3::NakagamiPropagationLossModel",
            {"Distance1": 80.0, "Distance2": 200.0, "m0": 1.5, "m1": 0.75, "m2": 0.75},
        ),
    ],
)
def test_channel_config_reproduces_defaults(model, type_id, attributes):
    config = channel_config(model, antenna_height_m=1.5)
    assert config.loss_model == type_id
    assert dict(config.loss_attributes) == attributes
    assert config.delay_model == "ns3::ConstantSpeedPropagationDelayModel"


def test_two_ray_ground_height_follows_antenna_unless_set():
    assert channel_config(TwoRayGround(), 3.0).loss_attributes["HeightAboveZ"] == 3.0
    fixed = TwoRayGround(height_above_z_m=2.0)
    assert channel_config(fixed, 3.0).loss_attributes["HeightAboveZ"] == 2.0


def test_only_fixed_rss_and_nakagami_have_forced_stop():
    stops = {name: get_model(name).forced_stop_distance_m for name in DEFAULT_MODEL_ORDER}
    assert stops == {
        "Friis": None,
        "FixedRSS": 500.0,
        "ThreeLogDistance": None,
        "TwoRayGround": None,
        "Nakagami": 500.0,
    }


def test_lookup_is_case_insensitive_and_accepts_aliases():
    assert isinstance(get_model("friis"), Friis)
    assert isinstance(get_model("fixed_rss"), FixedRss)
    assert isinstance(get_model(" Two-Ray-Ground "), TwoRayGround)


def test_unknown_model_fails_fast():
    with pytest.raises(UnknownPropagationModelError, match="LogDistance"):
        get_model("LogDistance")
    with pytest.raises(ValueError):
        get_model("")


def test_channel_config_rejects_foreign_objects():
    with pytest.raises(TypeError):
        channel_config("Friis", 1.5)


def test_register_model_replaces_parameterisation():
    original = get_model("FixedRSS")
    try:
        register_model(FixedRss(rss_dbm=-60.0))
        assert channel_config(get_model("FixedRSS"), 1.5).loss_attributes == {"Rss": -60.0}
    finally:
        register_model(original)
