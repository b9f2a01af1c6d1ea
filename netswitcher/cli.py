import signal
import subprocess
import sys
import time

import click

from . import config
from .controller import create_controller
from .logging_config import setup_logging
from .network import (
    get_current_service_config,
    get_network_identity,
    get_network_services,
)
from .profiles import ConfigStore, ConfigType, NetworkConfig
from .utils import run_action


# --- Location Services / Wi-Fi Scanning Imports ---
try:
    import objc
    from CoreLocation import (
        CLLocationManager,
        kCLAuthorizationStatusNotDetermined,
        kCLAuthorizationStatusDenied,
        kCLAuthorizationStatusRestricted,
    )
    import CoreWLAN

    CORELOCATION_AVAILABLE = True
except ImportError:
    # This will fail on non-macOS platforms, which is fine.
    CORELOCATION_AVAILABLE = False


if CORELOCATION_AVAILABLE:
    try:

        class LocationAuthDelegate(objc.lookUpClass("NSObject")):
            """Delegate to handle location authorization callbacks."""

            def locationManagerDidChangeAuthorization_(self, manager):
                # Required by CoreLocation; the caller polls the status itself.
                pass

    except (objc.error, AttributeError):
        LocationAuthDelegate = None
else:
    LocationAuthDelegate = None


def signal_handler(signum, frame):
    """Handle interrupt signals gracefully."""
    signal_name = signal.Signals(signum).name
    click.echo(f"\n\nReceived {signal_name}. Exiting gracefully...")
    sys.exit(0)


# --- Helper Functions ---


def ask_yes_no(prompt, default="n"):
    """Asks a yes/no question and returns True for yes, False for no."""
    return click.confirm(prompt, default=(default.lower() == "y"))


def _report_save_error(error):
    if error:
        click.echo(click.style(f"Warning: configuration not saved: {error}", fg="yellow"), err=True)


def _validate_selection_input(choice_str, items):
    """Validate and parse a single numbered selection."""
    try:
        index = int(choice_str.strip()) - 1
    except ValueError:
        click.echo("Warning: Invalid input. Please enter a number.", err=True)
        return None
    if 0 <= index < len(items):
        return items[index]
    click.echo(f"Warning: Invalid selection '{index + 1}' ignored.", err=True)
    return None


def prompt_for_selection(prompt_title, items, current, manual_entry_label=None):
    """
    Prompt the user to pick one item from a numbered list.

    Args:
        prompt_title (str): The main title for the prompt section.
        items (list): Available strings to choose from.
        current (str): The currently selected value, kept on Enter.
        manual_entry_label (str): If set, offer to type a value instead.

    Returns:
        str: The selected value.
    """
    click.echo(click.style(prompt_title, bold=True))
    selection = current

    if not items:
        click.echo("No items were automatically discovered.")
    else:
        for i, item in enumerate(items, 1):
            marker = "x" if item == current else " "
            click.echo(f" [{marker}] {i}: {item}")

        default_index = str(items.index(current) + 1) if current in items else ""
        prompt_text = "Select one number"
        prompt_text += " (or press Enter to keep current)" if default_index else " (or press Enter to skip)"

        choice_str = click.prompt(prompt_text, default=default_index, show_default=bool(default_index))
        if choice_str != default_index:
            parsed = _validate_selection_input(choice_str, items)
            if parsed is not None:
                selection = parsed

    if manual_entry_label:
        manual = click.prompt(
            f"Enter a {manual_entry_label} manually, or press Enter to keep '{selection or ''}'",
            default="",
            show_default=False,
        )
        if manual.strip():
            selection = manual.strip()

    return selection


# --- Network Discovery Helper Functions ---


def _check_python_signature():
    """Check if Python interpreter has ad-hoc signature that might prevent Wi-Fi scanning."""
    # codesign reports on stderr
    _, codesign_output = run_action(["codesign", "-dv", sys.executable])
    if codesign_output and "flags=0x2(adhoc)" in codesign_output:
        click.echo(
            click.style(
                "Warning: This Python interpreter has an ad-hoc signature (e.g., from Homebrew). "
                "Wi-Fi scanning may fail; a venv built from /usr/bin/python3 works best.",
                fg="yellow",
            )
        )


def _request_location_authorization():
    """Request and check Location Services authorization. Returns True if authorized."""
    if not CORELOCATION_AVAILABLE or LocationAuthDelegate is None:
        click.echo("Location services not available - using manual SSID entry")
        return False

    try:
        manager = CLLocationManager.alloc().init()
        delegate = LocationAuthDelegate.alloc().init()
        manager.setDelegate_(delegate)
        status = manager.authorizationStatus()

        if status == kCLAuthorizationStatusNotDetermined:
            click.echo("Requesting Location Services access to scan for Wi-Fi networks...")
            manager.requestWhenInUseAuthorization()
            for _ in range(config.LOCATION_AUTH_POLL_COUNT):
                time.sleep(config.LOCATION_AUTH_POLL_INTERVAL)
                status = manager.authorizationStatus()
                if status != kCLAuthorizationStatusNotDetermined:
                    break

        if status in [kCLAuthorizationStatusDenied, kCLAuthorizationStatusRestricted]:
            click.echo(click.style("Error: Location Services access is denied or restricted.", fg="red"), err=True)
            click.echo(
                "Please enable Location Services for your terminal application in "
                "System Settings > Privacy & Security > Location Services.",
                err=True,
            )
            return False

        return True

    except Exception as e:
        click.echo(f"Could not check Location Services status: {e}", err=True)
        return False


def _perform_wifi_scan():
    """Perform the actual Wi-Fi network scan. Returns list of SSIDs."""
    try:
        interface = CoreWLAN.CWInterface.interface()
        if not interface:
            click.echo("No Wi-Fi interface found.", err=True)
            return []

        click.echo("Scanning for Wi-Fi networks... (this may take a moment)")
        networks, error = None, None
        for i in range(config.WIFI_SCAN_RETRY_COUNT):
            networks, error = interface.scanForNetworksWithName_error_(None, None)
            if networks is not None:
                break
            if error and "Busy" in str(error):
                time.sleep(config.WIFI_SCAN_RETRY_DELAY_BASE * (i + 1))
            else:
                break

        if networks is None:
            click.echo(f"Failed to scan for networks. Error: {error}", err=True)
            return []

        # Networks with a redacted SSID are dropped
        ssids = sorted({n.ssid() for n in networks if n.ssid()})
        click.echo(f"Found {len(ssids)} available networks.")
        return ssids

    except Exception as e:
        click.echo(f"An unexpected error occurred during Wi-Fi scan: {e}", err=True)
        return []


def get_available_ssids():
    """
    Attempts to get a list of available Wi-Fi SSIDs using CoreWLAN.
    Requires Location Services to be enabled for the terminal/script.
    """
    _check_python_signature()

    if not _request_location_authorization():
        return []

    return _perform_wifi_scan()


def _format_settings(settings):
    """Render NetworkConfig or ServiceSettings addressing as short lines."""
    lines = []
    if settings.use_dhcp:
        lines.append("Addressing: DHCP")
    else:
        lines.append("Addressing: Manual")
    if settings.ip_address:
        lines.append(f"IP: {settings.ip_address}")
    if settings.subnet_mask:
        lines.append(f"Mask: {settings.subnet_mask}")
    if settings.router:
        lines.append(f"Router: {settings.router}")
    dns = ", ".join(settings.dns_servers) if settings.dns_servers else "automatic"
    lines.append(f"DNS: {dns}")
    return lines


# --- CLI Commands ---


class OrderedGroup(click.Group):
    """Custom Click group that preserves command order."""

    def list_commands(self, ctx):
        return list(self.commands.keys())


@click.group(cls=OrderedGroup)
@click.option(
    "--config-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to configuration file (default: ~/.config/netswitcher/config.toml)",
)
@click.pass_context
def cli(ctx, config_file):
    """
    NetSwitcher - Switch network configurations by network identity on macOS.

    Save named IP/DNS configurations bound to a Wi-Fi network, a router MAC
    address, or a wired service, and apply them manually or automatically
    when a known network is joined.
    """
    ctx.obj = ConfigStore.load(config_file)
    setup_logging(debug=ctx.obj.debug)


@cli.command()
@click.pass_obj
def status(store):
    """Show the current network identity and the live settings of the selected service."""
    identity = get_network_identity()
    services = get_network_services()
    service = store.resolve_selected_service(services)

    click.echo(click.style("Network", bold=True))
    click.echo(f"  SSID: {identity.display_ssid or 'Unknown'}")
    click.echo(f"  Router MAC: {identity.router_mac or 'Unknown'}")
    click.echo(f"  Auto switch: {'on' if store.auto_switch else 'off'}")

    click.echo(click.style(f"\nService: {service}", bold=True))
    for line in _format_settings(get_current_service_config(service)):
        click.echo(f"  {line}")

    match = None
    if identity.display_ssid is not None:
        match = store.find_auto_apply_match(identity.display_ssid, identity.router_mac, log_level=10)
    click.echo(f"\nAuto-apply match: {match.name if match else 'none'}")


@cli.command(name="list")
@click.option("--offline", is_flag=True, help="Do not probe the network to mark matching configs.")
@click.pass_obj
def list_configs(store, offline):
    """List saved network configurations."""
    configs = store.configs()
    if not configs:
        click.echo("No saved configurations. Use 'netswitcher configure NAME' to add one.")
        return

    matching = set()
    if not offline:
        identity = get_network_identity(log_level=10)
        matching = {cfg.name for cfg in store.find_matching(identity.display_ssid, identity.router_mac)}

    for cfg in configs:
        marker = "●" if cfg.name in matching else " "
        target = cfg.target_service or store.network_service or config.DEFAULT_NETWORK_SERVICE
        click.echo(f"{marker} {cfg.display_name()} -> {target}")


def _configure_identity(cfg, identity, services):
    """Ask which network the config is keyed on."""
    if cfg.config_type == ConfigType.WIFI:
        current = cfg.ssid or identity.ssid or ""
        cfg.ssid = prompt_for_selection(
            "Wi-Fi network (leave empty to match any network):",
            get_available_ssids(),
            current,
            manual_entry_label="SSID",
        )
    else:
        wired = [f"{config.WIRED_LABEL_PREFIX}{s}" for s in services]
        current = cfg.ssid or identity.display_ssid or ""
        cfg.ssid = prompt_for_selection(
            "Wired service to match:",
            wired,
            current if current in wired else "",
            manual_entry_label="service label",
        )

    if identity.router_mac:
        bound = cfg.router_mac is not None or cfg.ssid == identity.display_ssid
        if ask_yes_no(
            f"Bind to the current router MAC ({identity.router_mac})?",
            default="y" if bound else "n",
        ):
            cfg.router_mac = identity.router_mac
        else:
            cfg.router_mac = None
    elif cfg.router_mac and not ask_yes_no(f"Keep router MAC binding ({cfg.router_mac})?", default="y"):
        cfg.router_mac = None


def _configure_addressing(cfg):
    """Ask for DHCP or static addressing."""
    cfg.use_dhcp = ask_yes_no("Use DHCP for addressing?", default="y" if cfg.use_dhcp else "n")
    if cfg.use_dhcp:
        return

    cfg.ip_address = click.prompt("IP address", default=cfg.ip_address or config.DEFAULT_STATIC_IP)
    cfg.subnet_mask = click.prompt("Subnet mask", default=cfg.subnet_mask or config.DEFAULT_SUBNET_MASK)
    cfg.router = click.prompt("Router", default=cfg.router or config.DEFAULT_ROUTER)


def _configure_dns(cfg):
    current = ", ".join(cfg.dns_servers)
    dns_str = click.prompt(
        "DNS servers (comma-separated, '-' for automatic)",
        default=current or "-",
    )
    if dns_str.strip() in ("", "-"):
        cfg.dns_servers = []
    else:
        cfg.dns_servers = [s.strip() for s in dns_str.split(",") if s.strip()]


@cli.command()
@click.argument("name")
@click.option(
    "--type",
    "config_type",
    type=click.Choice([t.value for t in ConfigType]),
    default=None,
    help="What the configuration is keyed on.",
)
@click.option("--from-current", is_flag=True, help="Start from the live settings of the target service.")
@click.pass_obj
def configure(store, name, config_type, from_current):
    """
    Create or update a network configuration interactively.

    Saving a configuration under an existing NAME replaces it.
    """
    services = get_network_services()
    identity = get_network_identity(log_level=10)
    existing = store.get(name)

    if existing:
        click.echo(f"Updating configuration '{name}'.")
        cfg = existing
    else:
        click.echo(f"Creating configuration '{name}'.")
        cfg = NetworkConfig.new(name, target_service=store.resolve_selected_service(services))
        if identity.is_wired:
            cfg.config_type = ConfigType.SERVICE

    if config_type:
        cfg.config_type = ConfigType(config_type)

    _configure_identity(cfg, identity, services)

    cfg.target_service = prompt_for_selection(
        "Apply to network service:",
        services,
        cfg.target_service or store.resolve_selected_service(services),
    )

    if from_current:
        live = get_current_service_config(cfg.target_service)
        cfg = NetworkConfig.from_live(
            name, live, ssid=cfg.ssid, target_service=cfg.target_service,
            config_type=cfg.config_type, router_mac=cfg.router_mac, auto_apply=cfg.auto_apply,
        )
        click.echo("Captured current settings:")
        for line in _format_settings(cfg):
            click.echo(f"  {line}")
        if ask_yes_no("Edit the captured settings?", default="n"):
            _configure_addressing(cfg)
            _configure_dns(cfg)
    else:
        _configure_addressing(cfg)
        _configure_dns(cfg)

    cfg.auto_apply = ask_yes_no(
        "Apply automatically when this network is joined?",
        default="y" if cfg.auto_apply else "n",
    )

    _report_save_error(store.add(cfg))
    click.echo(click.style(f"Configuration '{name}' saved.", fg="green"))


@cli.command()
@click.argument("name")
@click.pass_obj
def remove(store, name):
    """Remove a saved network configuration."""
    if name not in store:
        click.echo(f"No configuration named '{name}'.")
    _report_save_error(store.remove(name))


@cli.command()
@click.argument("name")
@click.pass_obj
def apply(store, name):
    """Apply a saved network configuration now."""
    cfg = store.get(name)
    if cfg is None:
        raise click.ClickException(f"No configuration named '{name}'.")

    controller = create_controller(store)
    result = controller.apply(cfg)
    if not result.success:
        raise click.ClickException(f"Failed to apply '{name}' to '{result.service}': {result.message}")
    click.echo(click.style(controller.status_message, fg="green"))


@cli.command(name="auto-switch")
@click.argument("state", required=False, type=click.Choice(["on", "off"]))
@click.pass_obj
def auto_switch(store, state):
    """Show or set automatic switching."""
    if state is None:
        click.echo(f"Auto switch is {'on' if store.auto_switch else 'off'}.")
        return
    _report_save_error(store.set_auto_switch(state == "on"))
    click.echo(f"Auto switch {'enabled' if store.auto_switch else 'disabled'}.")


@cli.command(name="select-service")
@click.argument("service", required=False)
@click.pass_obj
def select_service(store, service):
    """Show or choose the network service targeted by manual actions."""
    services = get_network_services()
    if service is None:
        current = store.resolve_selected_service(services)
        for item in services:
            click.echo(f"{'*' if item == current else ' '} {item}")
        return

    if service not in services:
        click.echo(click.style(f"Warning: '{service}' is not a known network service.", fg="yellow"), err=True)
    _report_save_error(store.select_service(service))
    click.echo(f"Selected network service: {service}")


@cli.command()
@click.pass_obj
def run(store):
    """
    Run the auto-switch loop in the foreground.

    Polls the network in the background and applies the matching
    auto-apply configuration whenever a known network is joined.
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def report(cfg, result):
        color = "green" if result.success else "red"
        click.echo(click.style(controller.status_message, fg=color))

    controller = create_controller(store, on_apply=report)
    click.echo(f"Watching network (auto switch {'on' if store.auto_switch else 'off'}). Press Ctrl+C to stop.")
    while True:
        time.sleep(controller.tick())


@cli.command()
@click.pass_obj
def menubar(store):
    """Run the menu bar app."""
    from .watcher import main

    main(store)


@cli.command()
def check():
    """
    Check if passwordless sudo is configured for networksetup.

    NetSwitcher runs networksetup through sudo to change addressing and DNS
    settings. This verifies sudo does not prompt for a password.
    """
    click.echo("Checking sudo permissions for NetSwitcher commands...")
    click.echo("  Testing networksetup...", nl=False)

    try:
        result = subprocess.run(
            ["sudo", "-n", config.NETWORKSETUP, "-listallnetworkservices"],
            capture_output=True,
            text=True,
            timeout=config.SUDO_CHECK_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        click.echo(click.style(" ✗ (timeout)", fg="red"))
        sys.exit(1)
    except FileNotFoundError:
        click.echo(click.style(" ✗ (not found)", fg="red"))
        sys.exit(1)

    if result.returncode == 0:
        click.echo(click.style(" ✓", fg="green"))
        click.echo(click.style("✓ sudo is correctly configured.", fg="green"))
        return

    click.echo(click.style(" ✗", fg="red"))
    click.echo(f"    Error: {result.stderr.strip()}")
    click.echo("\nTo fix this, add the following to your sudo configuration:")
    click.echo("  1. Run: sudo visudo -f /etc/sudoers.d/$USER")
    click.echo(f"  2. Add: $USER ALL=(ALL) NOPASSWD: {config.NETWORKSETUP}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
