import os

# Ensure system paths are in the PATH for launchd, which has a minimal environment
os.environ["PATH"] = "/usr/bin:/bin:/usr/sbin:/sbin:" + os.environ.get("PATH", "")

import rumps
from CoreFoundation import (
    CFRunLoopAddSource,
    CFRunLoopGetCurrent,
    kCFRunLoopDefaultMode,
)
from SystemConfiguration import (
    SCDynamicStoreCreate,
    SCDynamicStoreCreateRunLoopSource,
    SCDynamicStoreSetNotificationKeys,
)

from . import config
from .controller import create_controller
from .logging_config import setup_logging, get_logger
from .profiles import ConfigStore


# Get module logger
logger = get_logger(__name__)


class NetSwitcherApp(rumps.App):
    """Menu bar front end driving the NetSwitcher controller."""

    def __init__(self, store, *args, **kwargs):
        if "name" not in kwargs and not args:
            kwargs["name"] = "NetSwitcher"

        super(NetSwitcherApp, self).__init__(*args, **kwargs)

        self.store = store
        self.controller = create_controller(store, on_apply=self.on_apply)
        self.sc_store = None
        self.runloop = None
        self._menu_state = None

        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

        # The controller asks for 0.5s or 1s; ticking at the shorter interval honours both
        self.timer = rumps.Timer(self.on_tick, config.TICK_INTERVAL_BUSY)

        self.title = "⇄"
        self.update_menu()

    def setup_watcher(self):
        """Sets up the SystemConfiguration watcher to probe as soon as the network changes."""
        self.sc_store = SCDynamicStoreCreate(None, self.name, self.sc_callback, None)
        if self.sc_store:
            keys_to_watch = [
                "State:/Network/Global/IPv4",
                "State:/Network/Interface/.*/IPv4",
            ]
            SCDynamicStoreSetNotificationKeys(self.sc_store, keys_to_watch, None)
            self.runloop = CFRunLoopGetCurrent()
            source = SCDynamicStoreCreateRunLoopSource(None, self.sc_store, 0)
            CFRunLoopAddSource(self.runloop, source, kCFRunLoopDefaultMode)
            logger.info("SystemConfiguration watcher is set up")
        else:
            logger.error("Failed to create SCDynamicStore")

    def sc_callback(self, *args):
        """SystemConfiguration callback for network changes."""
        logger.debug("Network change notification received")
        self.controller.request_refresh()

    def on_tick(self, _):
        self.controller.tick()
        self.update_menu()

    def on_apply(self, cfg, result):
        title = "Configuration Applied" if result.success else "Configuration Failed"
        rumps.notification(
            title="NetSwitcher",
            subtitle=title,
            message=self.controller.status_message,
        )
        self._menu_state = None

    def _menu_snapshot(self):
        c = self.controller
        live = c.current_live_config
        return (
            c.current_ssid,
            c.current_router_mac,
            c.selected_service,
            tuple(c.services),
            None if live is None else (live.use_dhcp, live.ip_address, live.router, tuple(live.dns_servers)),
            c.status_message,
            c.last_applied,
            self.store.auto_switch,
            tuple(cfg.display_name() for cfg in self.store.configs()),
        )

    def update_menu(self):
        """Rebuilds the menu when anything it shows has changed."""
        state = self._menu_snapshot()
        if state == self._menu_state:
            return
        self._menu_state = state

        c = self.controller
        try:
            self.menu.clear()
        except Exception as e:
            logger.error(f"Menu clear error: {e}")

        menu_items = [
            "NetSwitcher",
            None,
            f"Network: {c.current_ssid or 'Unknown'}",
            f"Router: {c.current_router_mac or 'Unknown'}",
            f"Service: {c.selected_service}",
        ]

        live = c.current_live_config
        if live is not None:
            menu_items.append(f"Addressing: {'DHCP' if live.use_dhcp else 'Manual'}")
            if live.ip_address:
                menu_items.append(f"IP: {live.ip_address}")
            if live.router:
                menu_items.append(f"Router IP: {live.router}")
            menu_items.append(f"DNS: {', '.join(live.dns_servers) or 'automatic'}")

        if c.status_message:
            menu_items.extend([None, c.status_message])

        menu_items.extend(
            [
                None,
                self._build_configs_menu(),
                self._build_services_menu(),
                self._build_auto_switch_item(),
                None,
                rumps.MenuItem("Refresh", callback=self.refresh),
                rumps.MenuItem("Quit", callback=self.quit_app),
            ]
        )

        try:
            self.menu = menu_items
        except Exception as e:
            logger.error(f"Menu assignment error: {e}")

    def _build_configs_menu(self):
        c = self.controller
        parent = rumps.MenuItem("Configurations")
        configs = self.store.configs()
        if not configs:
            parent.add(rumps.MenuItem("No saved configurations"))
            return parent

        matching = set()
        if c.current_ssid is not None:
            matching = {cfg.name for cfg in self.store.find_matching(c.current_ssid, c.current_router_mac)}

        for cfg in configs:
            marker = "● " if cfg.name in matching else ""
            item = rumps.MenuItem(f"{marker}{cfg.display_name()}", callback=self.apply_config)
            item.config_name = cfg.name
            item.state = int(cfg.name == c.last_applied)
            parent.add(item)
        return parent

    def _build_services_menu(self):
        parent = rumps.MenuItem("Network Service")
        selected = self.controller.selected_service
        for service in self.controller.services:
            item = rumps.MenuItem(service, callback=self.select_service)
            item.state = int(service == selected)
            parent.add(item)
        return parent

    def _build_auto_switch_item(self):
        item = rumps.MenuItem("Auto Switch", callback=self.toggle_auto_switch)
        item.state = int(self.store.auto_switch)
        return item

    def apply_config(self, sender):
        """Manual "apply now" from the Configurations submenu."""
        cfg = self.store.get(sender.config_name)
        if cfg is None:
            logger.warning(f"Config '{sender.config_name}' no longer exists")
            return
        logger.info(f"Manual apply of '{cfg.name}' triggered from menu bar")
        self.controller.apply(cfg)
        self.update_menu()

    def select_service(self, sender):
        self._warn_on_save_error(self.controller.select_service(sender.title))
        self.update_menu()

    def toggle_auto_switch(self, sender):
        self._warn_on_save_error(self.controller.set_auto_switch(not self.store.auto_switch))
        self.update_menu()

    def refresh(self, _):
        logger.info("Manual refresh triggered from menu bar")
        self.controller.reload_services()
        self.controller.request_refresh()

    def _warn_on_save_error(self, error):
        if error:
            rumps.notification(
                title="NetSwitcher",
                subtitle="Settings Not Saved",
                message=error,
            )

    def quit_app(self, _):
        logger.info("Quit button clicked")
        rumps.quit_application()


def main(store=None):
    """Main function to run the app."""
    if store is None:
        store = ConfigStore.load()
    setup_logging(store.debug)

    app = NetSwitcherApp(store, name="com.user.netswitcher", quit_button=None)

    # Hide from dock - this prevents the Python icon from appearing in the dock
    import AppKit

    try:
        shared_app = AppKit.NSApplication.sharedApplication()
        shared_app.setActivationPolicy_(AppKit.NSApplicationActivationPolicyAccessory)
        logger.debug("Set application activation policy to hide from dock")
    except Exception as e:
        logger.warning(f"Could not hide from dock: {e}")

    app.setup_watcher()
    app.timer.start()
    app.run()


if __name__ == "__main__":
    main()
