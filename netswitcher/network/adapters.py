"""
Probe and actuator objects handed to the poller and the applier.

They bundle the detection and configuration functions behind the small
interfaces the rest of NetSwitcher depends on, so tests can substitute
fakes without patching module globals.
"""

from . import configuration, detection


class NetworkProbe:
    """Read-only view of the system network state."""

    def __init__(self, log_level=10):  # DEBUG level; polled every few seconds
        self.log_level = log_level

    def list_services(self):
        return detection.get_network_services()

    def current_identity(self):
        return detection.get_network_identity(log_level=self.log_level)

    def current_service_config(self, service):
        return detection.get_current_service_config(service)


class NetworkActuator:
    """Write-only access to a network service's settings."""

    def set_dhcp(self, service):
        return configuration.set_dhcp(service)

    def set_static(self, service, ip_address, subnet_mask, router):
        return configuration.set_static(service, ip_address, subnet_mask, router)

    def set_dns_servers(self, service, dns_servers):
        return configuration.set_dns_servers(service, dns_servers)
