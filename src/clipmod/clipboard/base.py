import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class ClipboardSource(ABC):
    """Text-only view of the system clipboard.

    Backends implement ``_get_text``/``_set_text`` and may raise freely;
    ``read`` and ``write`` turn backend failures into ``None``/``False`` so a
    busy or missing clipboard never stops the caller.
    """

    name = "base"

    @abstractmethod
    def _get_text(self) -> Optional[str]:
        pass

    @abstractmethod
    def _set_text(self, text: str) -> bool:
        pass

    def read(self) -> Optional[str]:
        try:
            return self._get_text()
        except Exception as e:
            logger.debug(f"{self.name} clipboard read failed: {e}")
            return None

    def write(self, text: str) -> bool:
        try:
            ok = self._set_text(text)
        except Exception as e:
            logger.warning(f"{self.name} clipboard write failed: {e}")
            return False
        if not ok:
            logger.warning(f"{self.name} clipboard write was not accepted")
        return bool(ok)
