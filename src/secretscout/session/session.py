"""Session: configuration, signatures and shared state for one scan."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from secretscout import __version__
from secretscout.config.schema import ScoutConfig
from secretscout.session.state import ScanState, Status
from secretscout.signatures.loader import load_signatures
from secretscout.signatures.models import SignatureSet


@dataclass
class Session:
    config: ScoutConfig
    signatures: SignatureSet
    state: ScanState = field(default_factory=ScanState)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("secretscout"))
    cancel: threading.Event = field(default_factory=threading.Event)
    app_version: str = __version__

    @classmethod
    def create(
        cls,
        config: ScoutConfig,
        signatures: Optional[SignatureSet] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "Session":
        """Load signatures (unless given) and start a fresh session.

        Raises ``SignatureError`` before any work starts when the bundle is unusable.
        """
        if signatures is None:
            signatures = load_signatures(config.signatures.file, config.scan.confidence_level)
        session = cls(config=config, signatures=signatures)
        if logger is not None:
            session.logger = logger
        return session

    def finish(self) -> None:
        self.state.set_status(Status.FINISHED)
