"""Filesystem locations of the managed artifacts."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from dnsadmin.core.coredns import CorefileManager, GSLBManager, HostsManager, ZoneManager
from dnsadmin.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


class ManagerConfig(BaseModel):
    """Where each artifact type lives. Passed explicitly to every manager."""

    corefile_path: Path = Field(..., description="Path of the CoreDNS Corefile")
    zone_dir: Path = Field(..., description="Directory of db.<domain> zone files")
    hosts_dir: Path = Field(..., description="Directory of hosts.<domain> files")
    gslb_dir: Path = Field(..., description="Directory of db.<domain>.yml GSLB configs")
    hosts_legacy_names: bool = Field(
        default=False, description="Hosts files are named <domain> without prefix"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ManagerConfig":
        """
        Build the config from environment variables.

        ``COREFILE_PATH`` is required. ``ZONE_DIR`` falls back to
        ``HOSTS_DIR`` and then to the Corefile's directory; ``HOSTS_DIR`` and
        ``GSLB_DIR`` fall back to the zone directory.

        Raises:
            ConfigurationError: If ``COREFILE_PATH`` is not set
        """
        env = os.environ if environ is None else environ

        corefile = env.get("COREFILE_PATH", "")
        if not corefile:
            raise ConfigurationError("COREFILE_PATH is required")
        corefile_path = Path(corefile)

        zone_dir = env.get("ZONE_DIR") or env.get("HOSTS_DIR") or str(corefile_path.parent)
        hosts_dir = env.get("HOSTS_DIR") or zone_dir
        gslb_dir = env.get("GSLB_DIR") or zone_dir
        legacy = env.get("HOSTS_LEGACY_NAMES", "").strip().lower() in TRUTHY

        config = cls(
            corefile_path=corefile_path,
            zone_dir=Path(zone_dir),
            hosts_dir=Path(hosts_dir),
            gslb_dir=Path(gslb_dir),
            hosts_legacy_names=legacy,
        )
        logger.debug(f"Loaded configuration: {config}")
        return config

    def corefile_manager(self) -> CorefileManager:
        return CorefileManager(self.corefile_path)

    def zone_manager(self) -> ZoneManager:
        return ZoneManager(self.zone_dir)

    def hosts_manager(self) -> HostsManager:
        return HostsManager(self.hosts_dir, legacy_names=self.hosts_legacy_names)

    def gslb_manager(self) -> GSLBManager:
        return GSLBManager(self.gslb_dir)
