from __future__ import annotations

from selenium import webdriver
from selenium.webdriver import ChromeOptions, FirefoxOptions

from selfheal.config.schema import HealingSettings
from selfheal.core.driver import SelfHealingDriver
from selfheal.core.engine import HealingEngine


def _chrome(settings: HealingSettings):
    options = ChromeOptions()
    if settings.headless:
        options.add_argument("--headless=new")
    return webdriver.Chrome(options=options)


def _firefox(settings: HealingSettings):
    options = FirefoxOptions()
    if settings.headless:
        options.add_argument("-headless")
    return webdriver.Firefox(options=options)


_LAUNCHERS = {"chrome": _chrome, "firefox": _firefox}


class BrowserSession:
    """Launches a local browser through Selenium Manager and wires healing into its command flow."""

    def __init__(self, settings: HealingSettings, engine: HealingEngine) -> None:
        self.settings = settings
        self.engine = engine
        self.healing: SelfHealingDriver | None = None

    def start(self, browser_name: str | None = None):
        name = (browser_name or self.settings.browser).lower()
        launcher = _LAUNCHERS.get(name)
        if launcher is None:
            raise ValueError(f"Unsupported browser: {browser_name}")
        driver = launcher(self.settings)
        driver.set_page_load_timeout(self.settings.page_load_timeout_seconds)
        if self.settings.heal_enabled:
            self.healing = SelfHealingDriver.attach(driver, self.engine, self.settings)
        return driver

    def stop(self, driver) -> None:
        if self.healing is not None:
            self.healing.detach()
            self.healing = None
        driver.quit()
