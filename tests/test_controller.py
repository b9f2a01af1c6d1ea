"""
Unit tests for netswitcher/controller.py

The controller is driven with a manual clock and a stub poller whose
snapshots are published by the test, so every tick is deterministic.
"""

import pytest
from unittest.mock import MagicMock

from netswitcher.controller import Controller, create_controller
from netswitcher.poller import Snapshot
from netswitcher.profiles import Applier, ConfigStore, ServiceSettings


class ManualClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class StubPoller:
    """Records refresh requests; tests publish finished probes with publish()."""

    def __init__(self, probe=None):
        self.probe = probe
        self.snapshot = Snapshot()
        self.refreshes = []
        self.is_refreshing = False

    def refresh(self, service):
        self.refreshes.append(service)
        return True

    def publish(self, ssid, router_mac=None, live_config=None):
        self.snapshot = Snapshot(
            ssid=ssid,
            router_mac=router_mac,
            live_config=live_config,
            generation=self.snapshot.generation + 1,
        )

    def read(self):
        return self.snapshot


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def poller():
    return StubPoller()


@pytest.fixture
def store(config_file, home_config, office_config, lab_config):
    return ConfigStore(
        configs=[home_config, office_config, lab_config],
        auto_switch=True,
        network_service="Wi-Fi",
        path=config_file,
    )


@pytest.fixture
def controller(store, poller, mock_actuator, clock):
    return Controller(store, poller, Applier(mock_actuator), services=["Wi-Fi", "USB 10/100/1000 LAN"], clock=clock)


@pytest.mark.unit
class TestCadence:
    """Tests for refresh timing and tick delays."""

    def test_first_tick_probes_immediately(self, controller, poller):
        controller.tick()

        assert poller.refreshes == ["Wi-Fi"]

    def test_refresh_every_window(self, controller, poller, clock):
        controller.tick()
        clock.advance(4)
        controller.tick()
        assert len(poller.refreshes) == 1

        clock.advance(1)
        controller.tick()
        assert len(poller.refreshes) == 2

    def test_request_refresh_bypasses_window(self, controller, poller, clock):
        controller.tick()
        clock.advance(1)

        controller.request_refresh()
        controller.tick()

        assert len(poller.refreshes) == 2

    def test_tick_delay(self, controller, poller):
        assert controller.tick() == 1.0

        poller.is_refreshing = True

        assert controller.tick() == 0.5

    def test_loading_snapshot_is_not_consumed(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        poller.snapshot.is_loading = True

        controller.tick()

        assert controller.current_ssid is None
        mock_actuator.set_dhcp.assert_not_called()


@pytest.mark.unit
class TestAutoApply:
    """Tests for the auto-apply decision made on each tick."""

    def test_applies_on_identity_change(self, controller, poller, mock_actuator, clock):
        controller.tick()
        clock.advance(1)
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")

        controller.tick()

        assert controller.last_applied == "Home"
        assert controller.status_message == "Applied config: Home -> Wi-Fi"
        mock_actuator.set_dhcp.assert_called_once_with("Wi-Fi")
        # The applied service is re-probed straight away
        assert poller.refreshes[-1] == "Wi-Fi"

    def test_no_reapply_for_same_match(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()
        controller.try_auto_apply()

        assert mock_actuator.set_dhcp.call_count == 1

    def test_reapply_after_leaving_and_returning(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()
        poller.publish("CafeNet", "00:11:22:33:44:55")
        controller.tick()

        assert controller.last_applied is None

        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()

        assert mock_actuator.set_dhcp.call_count == 2

    def test_switch_between_matches(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()
        poller.publish("OfficeNet", "11:22:33:44:55:66")
        controller.tick()

        assert controller.last_applied == "Office"
        mock_actuator.set_static.assert_called_once_with("Wi-Fi", "10.0.0.50", "255.255.0.0", "10.0.0.1")

    def test_unverified_mac_does_not_apply(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", None)

        controller.tick()

        assert controller.last_applied is None
        mock_actuator.set_dhcp.assert_not_called()

    def test_disabled_auto_switch(self, controller, store, poller, mock_actuator):
        store.auto_switch = False
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")

        controller.tick()

        mock_actuator.set_dhcp.assert_not_called()

    def test_unknown_network_does_nothing(self, controller, poller, mock_actuator):
        controller.last_applied = "Home"
        poller.publish(None, None)

        controller.tick()

        assert controller.last_applied == "Home"
        mock_actuator.set_dhcp.assert_not_called()

    def test_unchanged_identity_does_not_reevaluate(self, controller, poller, mock_actuator):
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()
        controller.last_applied = None
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff", ServiceSettings(use_dhcp=True))

        controller.tick()

        assert mock_actuator.set_dhcp.call_count == 1
        assert controller.current_live_config.use_dhcp is True

    def test_failed_apply_is_retried(self, controller, poller, mock_actuator):
        mock_actuator.set_dhcp.return_value = (False, "sudo: a password is required")
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")

        controller.tick()

        assert controller.last_applied is None
        assert controller.status_message == "Apply failed: sudo: a password is required"

        mock_actuator.set_dhcp.return_value = (True, "")
        controller.try_auto_apply()

        assert controller.last_applied == "Home"

    def test_enabling_auto_switch_applies_now(self, controller, store, poller, mock_actuator):
        store.auto_switch = False
        poller.publish("HomeNet", "aa:bb:cc:dd:ee:ff")
        controller.tick()

        assert controller.set_auto_switch(True) is None

        assert store.auto_switch is True
        assert controller.last_applied == "Home"
        mock_actuator.set_dhcp.assert_called_once()

    def test_on_apply_callback(self, store, poller, mock_actuator, clock, home_config):
        on_apply = MagicMock()
        controller = Controller(store, poller, Applier(mock_actuator), services=["Wi-Fi"], clock=clock, on_apply=on_apply)

        result = controller.apply(home_config)

        on_apply.assert_called_once_with(home_config, result)


@pytest.mark.unit
class TestServices:
    """Tests for service selection."""

    def test_select_service_persists_and_refreshes(self, controller, store, poller, config_file):
        controller.tick()

        controller.select_service("USB 10/100/1000 LAN")
        controller.tick()

        assert poller.refreshes[-1] == "USB 10/100/1000 LAN"
        assert ConfigStore.load(config_file).network_service == "USB 10/100/1000 LAN"

    def test_unlisted_service_falls_back_to_first(self, store, poller, mock_actuator, clock):
        store.network_service = "Ethernet"
        controller = Controller(store, poller, Applier(mock_actuator), services=["USB 10/100/1000 LAN"], clock=clock)

        assert controller.selected_service == "USB 10/100/1000 LAN"

    def test_services_listed_from_probe(self, store, fake_probe, mock_actuator):
        controller = Controller(store, StubPoller(fake_probe), Applier(mock_actuator))

        assert controller.services == ["Wi-Fi", "USB 10/100/1000 LAN"]

        fake_probe.services = ["Wi-Fi"]
        assert controller.reload_services() == ["Wi-Fi"]


@pytest.mark.unit
class TestCreateController:
    """Tests for wiring a controller to real components."""

    def test_uses_given_probe_and_actuator(self, store, fake_probe, mock_actuator):
        controller = create_controller(store, probe=fake_probe, actuator=mock_actuator)

        assert controller.poller.probe is fake_probe
        assert controller.applier.actuator is mock_actuator

    def test_end_to_end_with_real_poller(self, store, fake_probe, mock_actuator):
        from netswitcher.profiles import NetworkIdentity

        fake_probe.identity = NetworkIdentity(ssid="OfficeNet")
        controller = create_controller(store, probe=fake_probe, actuator=mock_actuator)

        controller.tick()
        controller.poller.join(5)
        controller.tick()

        assert controller.current_ssid == "OfficeNet"
        assert controller.last_applied == "Office"
        controller.poller.join(5)
