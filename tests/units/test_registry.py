import pytest

from units.base_unit import Action, BaseUnit, UnitState
from units.orchestrator import import_unit_modules
from units.registry import UnitRegistry


@pytest.fixture(autouse=True)
def registered_units():
    import_unit_modules()


@pytest.fixture
def temporary_units(mocker):
    mocker.patch.dict(UnitRegistry._registry)

    def register(name, dependencies):
        @UnitRegistry.register(name=name, metadata={"dependencies": dependencies})
        class _Unit(BaseUnit):
            def probe(self):
                return UnitState(installed=True)

            def apply(self, action, state):
                pass

        return _Unit

    return register


def test_full_plan_follows_fixed_order():
    assert UnitRegistry.resolve_dependencies(["docker_smoke_test"]) == [
        "system_update",
        "base_packages",
        "python",
        "go",
        "nodejs",
        "npm",
        "yarn",
        "docker",
        "docker_smoke_test",
    ]


def test_selecting_a_unit_pulls_in_everything_before_it():
    assert UnitRegistry.resolve_dependencies(["python"]) == [
        "system_update",
        "base_packages",
        "python",
    ]


def test_register_sets_name_and_metadata(temporary_units):
    unit_class = temporary_units("test_standalone", [])

    assert UnitRegistry.get_unit("test_standalone") is unit_class
    assert unit_class.name == "test_standalone"
    assert unit_class.metadata == {"dependencies": []}


def test_duplicate_registration_is_rejected(temporary_units):
    temporary_units("test_duplicate", [])

    with pytest.raises(ValueError, match="already registered"):
        temporary_units("test_duplicate", [])


def test_unknown_unit():
    with pytest.raises(KeyError, match="No unit registered with name 'nope'"):
        UnitRegistry.get_unit("nope")


def test_circular_dependency_detected(temporary_units):
    temporary_units("test_cycle_a", ["test_cycle_b"])
    temporary_units("test_cycle_b", ["test_cycle_a"])

    with pytest.raises(ValueError, match="Circular dependency"):
        UnitRegistry.resolve_dependencies(["test_cycle_a"])


def test_default_decision_is_install_or_upgrade(temporary_units, app_settings, host_env, mock_apt):
    unit_class = temporary_units("test_decide", [])
    unit = unit_class(app_settings, host_env, apt_manager=mock_apt)

    assert unit.decide(UnitState(installed=False)) is Action.INSTALL
    assert unit.decide(UnitState(installed=True)) is Action.UPGRADE
