import logging
import os
import sys
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from madra.application.services.event_bus import EventBus
from madra.application.services.seed_policy import derive_seed
from madra.bootstrap import EngineSettings, configure_logging, create_simulation
from madra.domain.services.advancement_policy import TierThresholdPolicy


class EngineSettingsTests(unittest.TestCase):
    def test_defaults_when_environment_is_empty(self) -> None:
        settings = EngineSettings.from_env()
        self.assertIsNone(settings.dice_seed)
        self.assertEqual("WARNING", settings.log_level)
        self.assertFalse(settings.event_bus_enabled)

    def test_reads_prefixed_variables(self) -> None:
        env = {
            "MADRA_DICE_SEED": " 42 ",
            "MADRA_LOG_LEVEL": "debug",
            "MADRA_EVENT_BUS_ENABLED": "yes",
        }
        with mock.patch.dict(os.environ, env):
            settings = EngineSettings.from_env()
        self.assertEqual(EngineSettings(dice_seed=42, log_level="DEBUG", event_bus_enabled=True), settings)

    def test_non_integer_seed_is_rejected(self) -> None:
        with mock.patch.dict(os.environ, {"MADRA_DICE_SEED": "forty-two"}):
            with self.assertRaises(ValueError) as ctx:
                EngineSettings.from_env()
        self.assertIn("MADRA_DICE_SEED", str(ctx.exception))


class CreateSimulationTests(unittest.TestCase):
    def setUp(self) -> None:
        self._logger = logging.getLogger("madra")
        self._previous_level = self._logger.level

    def tearDown(self) -> None:
        self._logger.setLevel(self._previous_level)

    def test_configured_seed_wins(self) -> None:
        simulation = create_simulation(EngineSettings(dice_seed=13), world_id="ashwind")
        self.assertEqual(13, simulation.dice.seed)
        self.assertIs(simulation.dice, simulation.combat.dice)
        self.assertIs(simulation.dice, simulation.progression.dice)

    def test_world_id_derives_a_stable_seed(self) -> None:
        first = create_simulation(EngineSettings(), world_id="ashwind")
        second = create_simulation(EngineSettings(), world_id="ashwind")
        self.assertEqual(derive_seed("simulation.dice", {"world_id": "ashwind"}), first.dice.seed)
        self.assertEqual(first.dice.roll(20, 4, 0), second.dice.roll(20, 4, 0))

    def test_settings_are_read_from_environment_when_omitted(self) -> None:
        with mock.patch.dict(os.environ, {"MADRA_DICE_SEED": "19", "MADRA_EVENT_BUS_ENABLED": "1"}):
            simulation = create_simulation()
        self.assertEqual(19, simulation.dice.seed)
        self.assertIsInstance(simulation.event_bus, EventBus)

    def test_event_bus_is_off_by_default(self) -> None:
        simulation = create_simulation(EngineSettings(dice_seed=1))
        self.assertIsNone(simulation.event_bus)
        self.assertIsNone(simulation.combat.event_publisher)

    def test_explicit_bus_and_policy_are_wired_through(self) -> None:
        bus = EventBus()
        policy = TierThresholdPolicy({"Iron": 250})
        simulation = create_simulation(EngineSettings(dice_seed=1), event_bus=bus, advancement_policy=policy)
        self.assertIs(bus, simulation.event_bus)
        self.assertIs(policy, simulation.progression.advancement_policy)

    def test_configure_logging_sets_package_logger_level(self) -> None:
        configure_logging("DEBUG")
        self.assertEqual(logging.DEBUG, logging.getLogger("madra").level)
        create_simulation(EngineSettings(dice_seed=1, log_level="ERROR"))
        self.assertEqual(logging.ERROR, logging.getLogger("madra").level)


if __name__ == "__main__":
    unittest.main()
