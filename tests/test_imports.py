def test_import_overland_package() -> None:
    import importlib

    module = importlib.import_module("overland")
    assert module is not None


def test_import_rng_no_side_effects() -> None:
    from overland.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)


def test_services_package_exports() -> None:
    import overland.services as services

    for name in services.__all__:
        assert hasattr(services, name)
