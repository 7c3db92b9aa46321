"""Lissage exponentiel de la puissance reçue pendant un run."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class RssSampler:
    """Running RSS estimate fed by every PHY frame reception.

    Each reported signal level ``s`` updates the estimate as
    ``estimate = (s + estimate) / 2``. The filter starts from ``0`` and keeps
    that value when no frame is received during the run.
    """

    RESET_VALUE = 0.0

    def __init__(self) -> None:
        self._estimate = self.RESET_VALUE
        self.frames = 0

    def reset(self) -> None:
        self._estimate = self.RESET_VALUE
        self.frames = 0

    def record(self, signal_dbm: float) -> None:
        """Callback branché sur l'événement « trame reçue » de la PHY."""

        logger.debug("Trame reçue avec un signal de %s dBm", signal_dbm)
        self._estimate = (float(signal_dbm) + self._estimate) / 2.0
        self.frames += 1

    def current_estimate(self) -> float:
        return self._estimate


__all__ = ["RssSampler"]
