"""
Script Catalog

Discovers animation scripts in a directory, queries each one for its
descriptor and hands out AnimationInstances bound to them.
"""

import os
import subprocess
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
from uuid import UUID

from animscript.engine.animation_instance import AnimationInstance
from animscript.engine.script_process import ScriptProcess
from animscript.errors import DiscoveryTimeout, MalformedMetadata
from animscript.models.descriptor import ScriptDescriptor
from animscript.models.enums import LogCategory
from animscript.protocol.info import parse_guid, parse_info
from animscript.utils.logger import get_logger

log = get_logger().for_category(LogCategory.CATALOG)

INFO_ARG = "--ckb-info"


class ScriptCatalog:
    """
    Owner of all discovered script descriptors, keyed by guid

    Example:
        catalog = ScriptCatalog()
        catalog.discover("/usr/lib/ckb-animations")
        for desc in catalog.list():
            print(desc.name)
        anim = catalog.clone_for_use(desc.guid)
    """

    def __init__(
        self,
        info_timeout: float = 1.0,
        kill_timeout: float = 1.0,
        process_factory: Callable[[Path], ScriptProcess] = ScriptProcess,
    ):
        self.info_timeout = info_timeout
        self.kill_timeout = kill_timeout
        self._process_factory = process_factory
        self.scripts: Dict[UUID, ScriptDescriptor] = {}

    # ------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------

    def discover(self, directory: Union[str, Path]) -> List[ScriptDescriptor]:
        """
        Replace the catalog with the valid scripts found in `directory`.

        Candidates that time out, fail to run, produce invalid metadata or
        repeat an already accepted guid are skipped.

        Returns:
            Accepted descriptors in discovery order
        """
        directory = Path(directory)
        self.scripts.clear()

        if not directory.is_dir():
            log.warn(f"Animation directory not found: {directory}")
            return []

        log.info(f"Scanning {directory}")
        for path in self.candidates(directory):
            descriptor = self.load(path)
            if descriptor is None:
                continue
            if descriptor.guid in self.scripts:
                log.warn(
                    f"Skipping {path.name}: duplicate guid",
                    guid=descriptor.guid_text,
                    first=self.scripts[descriptor.guid].path,
                )
                continue
            self.scripts[descriptor.guid] = descriptor
            log.info(f"Accepted {descriptor.name}", version=descriptor.version, path=path)

        log.info("Scan complete", scripts=len(self.scripts))
        return list(self.scripts.values())

    @staticmethod
    def candidates(directory: Path) -> List[Path]:
        """Executable regular files, sorted by name (hidden files skipped)"""
        return sorted(
            p for p in directory.iterdir()
            if not p.name.startswith(".") and p.is_file() and os.access(p, os.X_OK)
        )

    def load(self, path: Path) -> Optional[ScriptDescriptor]:
        """Query one executable, None if it is not a usable script"""
        log.debug(f"Scanning {path}")
        try:
            output = self.query_info(path)
            return parse_info(output.splitlines(), path=path)
        except DiscoveryTimeout:
            log.warn(f"Rejected {path.name}: no answer within {self.info_timeout}s")
        except MalformedMetadata as ex:
            log.warn(f"Rejected {path.name}: {ex}")
        except OSError as ex:
            log.warn(f"Rejected {path.name}: cannot execute", error=str(ex))
        return None

    def query_info(self, path: Path) -> str:
        """
        Run `<path> --ckb-info` and return its standard output.

        Raises:
            DiscoveryTimeout: still running after info_timeout (it is killed)
            OSError: not executable
        """
        try:
            result = subprocess.run(
                [str(path), INFO_ARG],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                timeout=self.info_timeout,
            )
        except subprocess.TimeoutExpired as ex:
            raise DiscoveryTimeout(str(path)) from ex
        return result.stdout.decode("utf-8", "replace")

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    def list(self) -> List[ScriptDescriptor]:
        """
        All scripts sorted by display name.

        Scripts sharing a display name all get their guid appended,
        e.g. "Wave {8C9B...}", and keep that name from then on.
        """
        groups: Dict[str, List[ScriptDescriptor]] = defaultdict(list)
        for desc in self.scripts.values():
            groups[desc.name].append(desc)

        for name, members in groups.items():
            if len(members) < 2:
                continue
            for desc in members:
                renamed = desc.renamed(f"{name} {desc.guid_text}")
                self.scripts[desc.guid] = renamed
                log.debug(f"Renamed duplicate '{name}'", to=renamed.name)

        return sorted(self.scripts.values(), key=lambda d: d.name)

    def get(self, guid: Union[UUID, str]) -> Optional[ScriptDescriptor]:
        if isinstance(guid, str):
            guid = parse_guid(guid)
        return self.scripts.get(guid) if guid else None

    def find(self, text: str) -> Optional[ScriptDescriptor]:
        """Look a script up by guid text or exact display name"""
        desc = self.get(text)
        if desc is not None:
            return desc
        for desc in self.scripts.values():
            if desc.name == text:
                return desc
        return None

    def clone_for_use(self, guid: Union[UUID, str]) -> Optional[AnimationInstance]:
        """Fresh, uninitialized instance of a script, None if guid is unknown"""
        desc = self.get(guid)
        if desc is None:
            return None
        return AnimationInstance(
            desc,
            process_factory=self._process_factory,
            kill_timeout=self.kill_timeout,
        )

    def __len__(self) -> int:
        return len(self.scripts)

    def __contains__(self, guid: object) -> bool:
        return guid in self.scripts
